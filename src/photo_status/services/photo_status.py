"""Public facade over the photo status store and poll scheduler."""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

from photo_status.domain.status import PhotoId, Status, StatusSnapshot
from photo_status.services.scheduler import PollScheduler, Redraw
from photo_status.services.status_store import StatusStore
from photo_status.services.visibility import VisibilityGate


@dataclass
class PhotoStatusService:
    """Operations UI consumers use to read and drive photo status monitoring."""

    store: StatusStore
    scheduler: PollScheduler
    gate: VisibilityGate
    redraw: Redraw

    def get_status(self, photo_id: PhotoId) -> Status:
        """Return the status for a photo, defaulting to ``Status.UNKNOWN``."""
        return self.store.status_of(photo_id)

    def start_monitoring(
        self, photo_id: PhotoId, initial: Status = Status.PROCESSING
    ) -> None:
        """Begin monitoring a photo. Terminal initial states are recorded only."""
        _check_photo_id(photo_id)
        self.store.ensure_meta(photo_id)
        self.store.set_status(photo_id, Status(initial))
        self.scheduler.reconcile()
        self.redraw()

    def stop_monitoring(self, photo_id: PhotoId) -> None:
        """Stop monitoring a photo and forget its status and history."""
        self.store.forget(photo_id)
        self.scheduler.reconcile()
        self.redraw()

    def update_status(self, photo_id: PhotoId, status: Status) -> None:
        """Override a status locally and adjust polling accordingly."""
        _check_photo_id(photo_id)
        self.store.ensure_meta(photo_id)
        changed = self.store.set_status(photo_id, Status(status))
        self.scheduler.reconcile()
        if changed:
            self.redraw()

    def monitor_reported(self, photo_id: PhotoId, reported: Status) -> bool:
        """Start monitoring a photo a listing reported as processing.

        Photos that already have a local status or are already monitored are
        left alone. Returns True when monitoring was started.
        """
        if (
            Status(reported) is not Status.PROCESSING
            or self.get_status(photo_id) is not Status.UNKNOWN
            or self.is_monitoring(photo_id)
        ):
            return False
        self.start_monitoring(photo_id, Status.PROCESSING)
        return True

    def has_processing_photos(self) -> bool:
        """Return True if any photo is being polled."""
        return bool(self.store.active_poll)

    def get_processing_photos(self) -> list[PhotoId]:
        """Return the ids of photos being polled, ascending."""
        return sorted(self.store.active_poll)

    def is_monitoring(self, photo_id: PhotoId) -> bool:
        """Return True if the photo is being polled."""
        return photo_id in self.store.active_poll

    def get_last_error(self, photo_id: PhotoId) -> str | None:
        """Return the last status check error for a photo, if any."""
        meta = self.store.meta.get(photo_id)
        return meta.last_error if meta else None

    def snapshot(self) -> StatusSnapshot:
        """Return a consistent copy of the current state."""
        return self.store.snapshot()

    def set_page_hidden(self, hidden: bool) -> None:
        """Report a page visibility change."""
        self.gate.set_hidden(hidden)

    async def wait_until_settled(
        self,
        photo_ids: Iterable[PhotoId],
        timeout: float | None = None,
        check_interval: float = 0.05,
    ) -> StatusSnapshot:
        """Wait until none of the photos is polled any more.

        Raises ``TimeoutError`` if they are still processing after ``timeout``
        seconds.
        """
        pending = set(photo_ids)

        async def _wait() -> None:
            while pending & self.store.active_poll:
                await asyncio.sleep(check_interval)

        await asyncio.wait_for(_wait(), timeout)
        return self.snapshot()


def _check_photo_id(photo_id: PhotoId) -> None:
    if photo_id <= 0:
        raise ValueError(f"photo id must be positive, got {photo_id}")
