import pytest
from pydantic import ValidationError

from feedfinder.core.settings import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("HTTP_TIMEOUT_SECONDS", raising=False)

    settings = Settings(_env_file=None)

    assert settings.http_timeout_seconds == 10.0
    assert settings.reddit_icon_timeout_seconds == 5.0
    assert settings.itunes_lookup_url == "https://itunes.apple.com/lookup"
    assert settings.discovery_itunes_country is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "3.5")

    settings = get_settings()

    assert settings.log_level == "DEBUG"
    assert settings.http_timeout_seconds == 3.5
    assert get_settings() is settings


def test_invalid_log_level_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="LOUD")


def test_non_positive_timeout_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, http_timeout_seconds=0)
