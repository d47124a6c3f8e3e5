"""Shared poll scheduler for photo processing status.

One recurring timer serves every monitored photo. Each tick picks the photos
whose backoff window has elapsed, requests their status concurrently and folds
the whole batch back into the store before deciding whether to redraw.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from photo_status.adapters.photo_status_client import PhotoStatusClient
from photo_status.domain.status import PhotoId, PhotoStatusResponse, Status
from photo_status.services.backoff import BackoffPolicy
from photo_status.services.status_store import StatusStore
from photo_status.services.visibility import VisibilityGate

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Redraw = Callable[[], None]


def epoch_ms() -> float:
    """Return the wall clock in epoch milliseconds."""
    return time.time() * 1000


@dataclass(frozen=True)
class PollResult:
    """Outcome of one status request within a tick."""

    photo_id: PhotoId
    response: PhotoStatusResponse | None = None
    error: BaseException | None = None


@dataclass
class PollScheduler:
    """Owns the poll timer and applies retry and give-up policy."""

    store: StatusStore
    client: PhotoStatusClient
    gate: VisibilityGate
    redraw: Redraw
    policy: BackoffPolicy = field(default_factory=BackoffPolicy)
    interval_ms: int = 2000
    max_retries: int = 8
    clock: Clock = epoch_ms
    _timer: asyncio.Task | None = field(default=None, init=False, repr=False)
    _ticks: set[asyncio.Task] = field(default_factory=set, init=False, repr=False)
    _in_progress: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        self.gate.subscribe(self._on_visibility_change)

    @property
    def is_active(self) -> bool:
        """Return True while the poll timer is running."""
        return self._timer is not None and not self._timer.done()

    @property
    def in_progress(self) -> bool:
        """Return True while a tick is waiting on its request batch."""
        return self._in_progress

    def ensure_running(self) -> None:
        """Start the timer if there is work and the page is visible."""
        if self.is_active or not self.store.active_poll or self.gate.hidden:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, poll timer start deferred")
            return
        self._timer = loop.create_task(self._run_timer())
        logger.debug(
            "Poll timer started for %d photo(s)", len(self.store.active_poll)
        )

    def stop(self) -> None:
        """Stop the timer. Requests already in flight are left to finish."""
        if self._timer is None:
            return
        timer, self._timer = self._timer, None
        timer.cancel()
        logger.debug("Poll timer stopped")

    def reconcile(self) -> None:
        """Bring the timer in line with the polled set and page visibility."""
        if self.store.active_poll and not self.gate.hidden:
            self.ensure_running()
        else:
            self.stop()

    async def aclose(self) -> None:
        """Stop the timer and wait for outstanding ticks to settle."""
        self.stop()
        if self._ticks:
            await asyncio.gather(*self._ticks, return_exceptions=True)

    async def poll_once(self) -> None:
        """Run a single tick."""
        if self._in_progress:
            logger.debug("Previous poll cycle still running, skipping tick")
            return
        if not self.store.active_poll or self.gate.hidden:
            self.stop()
            return
        self._in_progress = True
        try:
            await self._poll_cycle()
        except Exception:
            logger.exception("Photo status poll cycle failed")
        finally:
            self._in_progress = False

    async def _run_timer(self) -> None:
        interval = self.interval_ms / 1000
        while True:
            await asyncio.sleep(interval)
            tick = asyncio.create_task(self.poll_once())
            self._ticks.add(tick)
            tick.add_done_callback(self._ticks.discard)

    async def _poll_cycle(self) -> None:
        now = self.clock()
        due = [
            photo_id
            for photo_id in sorted(self.store.active_poll)
            if self.policy.is_due(self.store.meta.get(photo_id), now)
        ]
        if not due:
            return

        # Stamp issue time before any request goes out.
        for photo_id in due:
            self.store.ensure_meta(photo_id).last_checked_at = now

        results = await asyncio.gather(*(self._fetch(photo_id) for photo_id in due))

        changed = False
        for result in results:
            changed = self._fold(result) or changed

        if not self.store.active_poll:
            self.stop()
        if changed:
            self.redraw()

    async def _fetch(self, photo_id: PhotoId) -> PollResult:
        try:
            response = await self.client.get_photo_status(photo_id)
        except Exception as exc:
            return PollResult(photo_id=photo_id, error=exc)
        return PollResult(photo_id=photo_id, response=response)

    def _fold(self, result: PollResult) -> bool:
        """Apply one result to the store and return True if a status changed."""
        photo_id = result.photo_id
        if photo_id not in self.store.active_poll:
            # Stopped or overridden while the request was in flight.
            logger.debug("Discarding stale status result for photo %d", photo_id)
            return False

        meta = self.store.ensure_meta(photo_id)
        if result.error is not None or result.response is None:
            meta.retries = min(self.max_retries, meta.retries + 1)
            meta.last_error = _describe_error(result.error)
            logger.info(
                "Status check for photo %d failed (%d/%d): %s",
                photo_id,
                meta.retries,
                self.max_retries,
                meta.last_error,
            )
            if meta.retries >= self.max_retries:
                logger.warning(
                    "Giving up on photo %d after %d failed status checks",
                    photo_id,
                    meta.retries,
                )
                return self.store.set_status(photo_id, Status.FAILED)
            return False

        meta.retries = 0
        meta.last_error = None
        return self.store.set_status(photo_id, result.response.status)

    def _on_visibility_change(self, hidden: bool) -> None:
        if hidden:
            self.stop()
        else:
            self.ensure_running()


def _describe_error(error: BaseException | None) -> str:
    if error is None:
        return "Unknown error"
    return str(error) or type(error).__name__
