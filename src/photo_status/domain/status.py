"""Domain models for photo processing status."""

from dataclasses import dataclass
from enum import IntEnum

from pydantic import BaseModel, field_validator

PhotoId = int


class Status(IntEnum):
    """Processing status shared with the photo backend.

    The server reports 0, 1 or 2; ``UNKNOWN`` is the client default before the
    first successful fetch.
    """

    UNKNOWN = -1
    DONE = 0
    PROCESSING = 1
    FAILED = 2

    @property
    def is_terminal(self) -> bool:
        """Return True when no further polling can change the status."""
        return self in {Status.DONE, Status.FAILED}


class PhotoStatusResponse(BaseModel):
    """Payload returned by the GetPhotoStatus endpoint."""

    status: Status

    @field_validator("status")
    @classmethod
    def _reject_unknown(cls, value: Status) -> Status:
        if value is Status.UNKNOWN:
            raise ValueError("server status must be 0, 1 or 2")
        return value


@dataclass
class PhotoMeta:
    """Per-photo polling bookkeeping."""

    retries: int = 0
    last_error: str | None = None
    last_checked_at: float | None = None


@dataclass(frozen=True)
class StatusSnapshot:
    """Point-in-time copy of the status store for consumers."""

    statuses: dict[PhotoId, Status]
    processing: tuple[PhotoId, ...]
    last_errors: dict[PhotoId, str]
