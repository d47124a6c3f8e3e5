"""Photo status API client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import ValidationError

from photo_status.domain.status import PhotoId, PhotoStatusResponse


class PhotoStatusError(Exception):
    """Raised when the status endpoint returns an unusable response."""


class PhotoStatusClient(Protocol):
    """Interface for the remote GetPhotoStatus call."""

    async def get_photo_status(self, photo_id: PhotoId) -> PhotoStatusResponse | None:
        """Return the processing status reported by the server."""


@dataclass
class HttpxPhotoStatusClient(PhotoStatusClient):
    """HTTPX-backed status client for the ``/rpc/GetPhotoStatus`` procedure."""

    base_url: str
    http_client: httpx.AsyncClient
    token: str | None = None
    timeout: float = 10

    @classmethod
    def create(
        cls, base_url: str, token: str | None = None, timeout: float = 10
    ) -> "HttpxPhotoStatusClient":
        """Create a status client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            token=token,
            timeout=timeout,
        )

    async def get_photo_status(self, photo_id: PhotoId) -> PhotoStatusResponse | None:
        """Fetch the processing status of a single photo."""
        url = f"{self.base_url}/rpc/GetPhotoStatus"
        headers: dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = await self.http_client.post(
            url, json={"id": photo_id}, headers=headers, timeout=self.timeout
        )
        if response.is_error:
            raise PhotoStatusError(
                f"GetPhotoStatus({photo_id}) failed with HTTP {response.status_code}"
            )
        if not response.content:
            return None
        try:
            return PhotoStatusResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise PhotoStatusError(
                f"GetPhotoStatus({photo_id}) returned a malformed payload"
            ) from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
