"""Tests for configuration helpers."""

import pytest

from photo_status.config import Settings, parse_photo_ids


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("PHOTO_API_BASE_URL", "https://api.example.test")
    monkeypatch.setenv("POLL_INTERVAL_MS", "500")

    settings = Settings()

    assert settings.photo_api_base_url == "https://api.example.test"
    assert settings.poll_interval_ms == 500
    assert settings.max_retries == 8
    assert settings.backoff_cap_ms == 20000


def test_parse_photo_ids_dedupes_in_order() -> None:
    assert parse_photo_ids(" 3, 1,,3 ,2") == [3, 1, 2]
    assert parse_photo_ids(None) == []


@pytest.mark.parametrize("raw", ["abc", "1,-2", "0"])
def test_parse_photo_ids_rejects_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_photo_ids(raw)
