"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from photo_status.adapters.photo_status_client import PhotoStatusClient
from photo_status.config import Settings
from photo_status.domain.status import PhotoId, PhotoStatusResponse, Status
from photo_status.services.backoff import BackoffPolicy
from photo_status.services.photo_status import PhotoStatusService
from photo_status.services.scheduler import PollScheduler
from photo_status.services.status_store import StatusStore
from photo_status.services.visibility import VisibilityGate


@dataclass
class FakeClock:
    """Manually advanced clock in epoch milliseconds."""

    now: float = 1_700_000_000_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@dataclass
class RedrawCounter:
    """Counts redraw requests."""

    count: int = 0

    def __call__(self) -> None:
        self.count += 1


@dataclass
class FakePhotoStatusClient(PhotoStatusClient):
    """Fake status client replaying scripted outcomes per photo.

    An outcome is a ``Status``, an exception to raise, or ``None`` for an
    absent response. Photos without a script report ``default``.
    """

    outcomes: dict[PhotoId, list[object]] = field(default_factory=dict)
    default: object = Status.PROCESSING
    calls: list[PhotoId] = field(default_factory=list)
    release: asyncio.Event | None = None

    def script(self, photo_id: PhotoId, *outcomes: object) -> None:
        self.outcomes.setdefault(photo_id, []).extend(outcomes)

    async def get_photo_status(self, photo_id: PhotoId) -> PhotoStatusResponse | None:
        self.calls.append(photo_id)
        if self.release is not None:
            await self.release.wait()
        queued = self.outcomes.get(photo_id)
        outcome = queued.pop(0) if queued else self.default
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            return None
        return PhotoStatusResponse(status=outcome)


@pytest.fixture
def settings() -> Settings:
    return Settings(photo_api_base_url="https://photos.example.test")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def redraws() -> RedrawCounter:
    return RedrawCounter()


@pytest.fixture
def client() -> FakePhotoStatusClient:
    return FakePhotoStatusClient()


@pytest.fixture
def store() -> StatusStore:
    return StatusStore()


@pytest.fixture
def gate() -> VisibilityGate:
    return VisibilityGate()


@pytest.fixture
def scheduler(
    store: StatusStore,
    client: FakePhotoStatusClient,
    gate: VisibilityGate,
    redraws: RedrawCounter,
    clock: FakeClock,
) -> PollScheduler:
    return PollScheduler(
        store=store,
        client=client,
        gate=gate,
        redraw=redraws,
        policy=BackoffPolicy(),
        clock=clock,
    )


@pytest.fixture
def service(
    store: StatusStore,
    scheduler: PollScheduler,
    gate: VisibilityGate,
    redraws: RedrawCounter,
) -> PhotoStatusService:
    return PhotoStatusService(
        store=store,
        scheduler=scheduler,
        gate=gate,
        redraw=redraws,
    )
