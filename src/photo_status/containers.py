"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from photo_status.adapters.photo_status_client import (
    HttpxPhotoStatusClient,
    PhotoStatusClient,
)
from photo_status.config import Settings
from photo_status.services.backoff import BackoffPolicy
from photo_status.services.photo_status import PhotoStatusService
from photo_status.services.scheduler import PollScheduler, Redraw
from photo_status.services.status_store import StatusStore
from photo_status.services.visibility import VisibilityGate

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_status_client: PhotoStatusClient
    status_store: StatusStore
    visibility_gate: VisibilityGate
    poll_scheduler: PollScheduler
    photo_status_service: PhotoStatusService
    close_resources: Callable[[], Awaitable[None]]


def _noop_redraw() -> None:
    logger.debug("Redraw requested")


def build_container(
    settings: Settings | None = None,
    redraw: Redraw | None = None,
    client: PhotoStatusClient | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_redraw = redraw or _noop_redraw
    http_client: HttpxPhotoStatusClient | None = None
    if client is None:
        http_client = HttpxPhotoStatusClient.create(
            base_url=resolved_settings.photo_api_base_url,
            token=resolved_settings.photo_api_token,
            timeout=resolved_settings.request_timeout_seconds,
        )
        client = http_client

    store = StatusStore()
    gate = VisibilityGate()
    scheduler = PollScheduler(
        store=store,
        client=client,
        gate=gate,
        redraw=resolved_redraw,
        policy=BackoffPolicy(
            base_ms=resolved_settings.backoff_base_ms,
            cap_ms=resolved_settings.backoff_cap_ms,
        ),
        interval_ms=resolved_settings.poll_interval_ms,
        max_retries=resolved_settings.max_retries,
    )
    service = PhotoStatusService(
        store=store,
        scheduler=scheduler,
        gate=gate,
        redraw=resolved_redraw,
    )

    async def close_resources() -> None:
        await scheduler.aclose()
        if http_client is not None:
            await http_client.close()

    return AppContainer(
        settings=resolved_settings,
        photo_status_client=client,
        status_store=store,
        visibility_gate=gate,
        poll_scheduler=scheduler,
        photo_status_service=service,
        close_resources=close_resources,
    )
