"""Tests for Settings parsing and defaults."""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.daily_limit == 10
    assert settings.supabase_url == ""
    assert settings.supabase_key == ""
    assert settings.usage_atomic_increment is False
    assert settings.allowed_origins == ["*"]
    assert settings.otel_enabled is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
    monkeypatch.setenv("DAILY_LIMIT", "25")
    monkeypatch.setenv("USAGE_ATOMIC_INCREMENT", "true")

    settings = Settings(_env_file=None)

    assert settings.supabase_url == "https://abc.supabase.co"
    assert settings.supabase_key == "service-key"
    assert settings.daily_limit == 25
    assert settings.usage_atomic_increment is True


@pytest.mark.parametrize(
    "value,expected",
    [
        ('["https://a.com", "https://b.com"]', ["https://a.com", "https://b.com"]),
        ("https://a.com, https://b.com", ["https://a.com", "https://b.com"]),
        ("", ["*"]),
        (None, ["*"]),
    ],
)
def test_allowed_origins_parsing(value, expected):
    assert Settings(allowed_origins=value, _env_file=None).allowed_origins == expected


def test_allowed_origins_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.com,https://b.com")

    settings = Settings(_env_file=None)

    assert settings.allowed_origins == ["https://a.com", "https://b.com"]


def test_invalid_environment_rejected():
    with pytest.raises(ValidationError):
        Settings(environment="qa", _env_file=None)


def test_negative_limit_rejected():
    with pytest.raises(ValidationError):
        Settings(daily_limit=-1, _env_file=None)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
