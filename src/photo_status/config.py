"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    photo_api_base_url: str
    photo_api_token: str | None = None
    poll_interval_ms: int = 2000
    max_retries: int = 8
    backoff_base_ms: int = 1500
    backoff_cap_ms: int = 20000
    request_timeout_seconds: float = 10
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_photo_ids(raw: str | None) -> list[int]:
    """Parse a comma separated list of photo ids, keeping first-seen order."""
    if raw is None:
        return []
    ids: list[int] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        if not value.isdigit() or int(value) <= 0:
            raise ValueError(f"invalid photo id: {value!r}")
        photo_id = int(value)
        if photo_id not in ids:
            ids.append(photo_id)
    return ids
