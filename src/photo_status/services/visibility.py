"""Page visibility flag used to suspend polling."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

VisibilityListener = Callable[[bool], None]


@dataclass
class VisibilityGate:
    """Tracks whether the page is hidden and notifies listeners on change."""

    hidden: bool = False
    _listeners: list[VisibilityListener] = field(
        default_factory=list, init=False, repr=False
    )

    def subscribe(self, listener: VisibilityListener) -> None:
        """Register a callback receiving the new ``hidden`` value."""
        self._listeners.append(listener)

    def set_hidden(self, hidden: bool) -> None:
        """Update the flag, notifying listeners only on a transition."""
        if hidden == self.hidden:
            return
        self.hidden = hidden
        logger.debug("Page visibility changed: hidden=%s", hidden)
        for listener in list(self._listeners):
            listener(hidden)
