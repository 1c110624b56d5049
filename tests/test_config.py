"""Tests for configuration helpers."""

from zoneinfo import ZoneInfo

from nutritrack.config import Settings, resolve_timezone


def test_settings_defaults() -> None:
    settings = Settings(openai_api_key="key")

    assert settings.openai_timeout_seconds == 30.0
    assert settings.storage_backend == "file"
    assert settings.daily_calorie_goal == 2000
    assert settings.log_level == "INFO"


def test_resolve_timezone() -> None:
    assert resolve_timezone(None) is None
    assert resolve_timezone("  ") is None
    assert resolve_timezone("America/Argentina/Buenos_Aires") == ZoneInfo(
        "America/Argentina/Buenos_Aires"
    )
