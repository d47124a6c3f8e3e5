"""Exponential backoff policy for photo status polling."""

from dataclasses import dataclass

from photo_status.domain.status import PhotoMeta


@dataclass(frozen=True)
class BackoffPolicy:
    """Decides whether a photo is due for another status request."""

    base_ms: int = 1500
    cap_ms: int = 20000

    def delay_ms(self, retries: int) -> int:
        """Return the minimum delay after ``retries`` consecutive failures."""
        if retries <= 0:
            return 0
        return min(self.cap_ms, self.base_ms * 2 ** (retries - 1))

    def is_due(self, meta: PhotoMeta | None, now: float) -> bool:
        """Return True when the next poll for a photo is allowed at ``now``."""
        if meta is None or meta.retries == 0:
            return True
        next_allowed = (meta.last_checked_at or 0) + self.delay_ms(meta.retries)
        return now >= next_allowed
