"""Tests for environment driven settings."""
from __future__ import annotations

from sealedcookie.core.config import Settings


def test_defaults_are_development_friendly(monkeypatch) -> None:
    for var in ("COOKIE_NAME", "COOKIE_HTTP_ONLY", "COOKIE_SECURE", "COOKIE_MAX_AGE", "COOKIE_SAME_SITE"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.cookie_name == "session"
    assert settings.cookie_http_only is False
    assert settings.cookie_secure is False
    assert settings.cookie_max_age == 604800
    assert settings.cookie_same_site == "lax"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("COOKIE_NAME", "sid")
    monkeypatch.setenv("COOKIE_HTTP_ONLY", "true")
    monkeypatch.setenv("COOKIE_SECURE", "true")
    monkeypatch.setenv("COOKIE_MAX_AGE", "60")
    settings = Settings(_env_file=None)
    assert settings.cookie_name == "sid"
    assert settings.cookie_http_only is True
    assert settings.cookie_secure is True
    assert settings.cookie_max_age == 60
