"""Unit tests for UTM cookie settings."""
import pytest

from src.utm_cookie.config import UtmCookieSettings, configure_utm_cookie, load_settings
from src.utm_cookie.tracking.cookie import UtmCookie
from src.utm_cookie.tracking.exceptions import InvalidConfiguration


def test_load_settings_defaults():
    """Test defaults apply when no variables are set."""
    settings = load_settings({})

    assert settings.name == "utm"
    assert settings.lifetime == 604800
    assert settings.path == "/"
    assert settings.domain == ""
    assert settings.overwrite is True
    assert settings.secure is False
    assert settings.httponly is False
    assert settings.auto_init is True


def test_load_settings_from_environment(monkeypatch):
    """Test environment variables are parsed into typed settings."""
    monkeypatch.setenv("UTM_COOKIE_NAME", "campaign")
    monkeypatch.setenv("UTM_COOKIE_LIFETIME", "3600")
    monkeypatch.setenv("UTM_COOKIE_DOMAIN", ".example.com")
    monkeypatch.setenv("UTM_COOKIE_OVERWRITE", "false")
    monkeypatch.setenv("UTM_COOKIE_SECURE", "true")
    monkeypatch.setenv("UTM_COOKIE_HTTPONLY", "1")
    monkeypatch.setenv("UTM_COOKIE_AUTO_INIT", "no")

    settings = load_settings()

    assert settings.name == "campaign"
    assert settings.lifetime == 3600
    assert settings.domain == ".example.com"
    assert settings.overwrite is False
    assert settings.secure is True
    assert settings.httponly is True
    assert settings.auto_init is False


def test_load_settings_rejects_negative_lifetime():
    with pytest.raises(InvalidConfiguration) as exc_info:
        load_settings({"UTM_COOKIE_LIFETIME": "-1"})

    assert exc_info.value.setting == "UTM_COOKIE_LIFETIME"


def test_load_settings_rejects_unparseable_boolean():
    with pytest.raises(InvalidConfiguration):
        load_settings({"UTM_COOKIE_SECURE": "maybe"})


def test_configure_applies_every_setting():
    """Test settings reach the engine through its setters."""
    settings = UtmCookieSettings(
        name="tracking",
        lifetime=60,
        path="/shop",
        domain="example.com",
        overwrite=False,
        secure=True,
        httponly=True,
    )

    utm = configure_utm_cookie(UtmCookie(), settings)

    assert utm.name == "tracking"
    assert utm.lifetime == 60
    assert utm.path == "/shop"
    assert utm.domain == "example.com"
    assert utm.overwrite is False
    assert utm.secure is True
    assert utm.http_only is True


def test_configure_rejects_zero_lifetime():
    """Test lifetime 0 passes load-time validation but not the engine."""
    settings = load_settings({"UTM_COOKIE_LIFETIME": "0"})

    with pytest.raises(InvalidConfiguration):
        configure_utm_cookie(UtmCookie(), settings)
