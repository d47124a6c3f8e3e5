"""In-memory store shared by the poll scheduler and the status facade."""

from dataclasses import dataclass, field

from photo_status.domain.status import PhotoId, PhotoMeta, Status, StatusSnapshot


@dataclass
class StatusStore:
    """Process-wide record of photo statuses and polling bookkeeping.

    ``active_poll`` only ever holds photos whose status is non-terminal.
    """

    statuses: dict[PhotoId, Status] = field(default_factory=dict)
    active_poll: set[PhotoId] = field(default_factory=set)
    meta: dict[PhotoId, PhotoMeta] = field(default_factory=dict)

    def status_of(self, photo_id: PhotoId) -> Status:
        """Return the known status, defaulting to ``Status.UNKNOWN``."""
        return self.statuses.get(photo_id, Status.UNKNOWN)

    def ensure_meta(self, photo_id: PhotoId) -> PhotoMeta:
        """Return the metadata bucket for a photo, creating it if missing."""
        meta = self.meta.get(photo_id)
        if meta is None:
            meta = PhotoMeta()
            self.meta[photo_id] = meta
        return meta

    def set_status(self, photo_id: PhotoId, status: Status) -> bool:
        """Record a status and sync polling membership; return True on change."""
        previous = self.statuses.get(photo_id)
        self.statuses[photo_id] = status
        if status is Status.PROCESSING:
            self.active_poll.add(photo_id)
        else:
            self.active_poll.discard(photo_id)
        return previous is not status

    def forget(self, photo_id: PhotoId) -> None:
        """Drop every trace of a photo."""
        self.statuses.pop(photo_id, None)
        self.active_poll.discard(photo_id)
        self.meta.pop(photo_id, None)

    def tracks(self, photo_id: PhotoId) -> bool:
        """Return True while the photo has an entry in the store."""
        return photo_id in self.statuses or photo_id in self.meta

    def snapshot(self) -> StatusSnapshot:
        """Copy the current state into an immutable snapshot."""
        return StatusSnapshot(
            statuses=dict(self.statuses),
            processing=tuple(sorted(self.active_poll)),
            last_errors={
                photo_id: meta.last_error
                for photo_id, meta in self.meta.items()
                if meta.last_error is not None
            },
        )
