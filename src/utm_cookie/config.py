"""UTM cookie configuration.

Settings come from environment variables with the defaults below, so the
middleware runs without any configuration:

    UTM_COOKIE_NAME       utm
    UTM_COOKIE_LIFETIME   604800 (7 days)
    UTM_COOKIE_PATH       /
    UTM_COOKIE_DOMAIN     (empty = current host)
    UTM_COOKIE_OVERWRITE  true
    UTM_COOKIE_SECURE     false
    UTM_COOKIE_HTTPONLY   false
    UTM_COOKIE_AUTO_INIT  true
"""
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .tracking.cookie import UtmCookie
from .tracking.exceptions import InvalidConfiguration


ENV_PREFIX = "UTM_COOKIE_"


class UtmCookieSettings(BaseModel):
    """Validated UTM cookie settings."""

    model_config = ConfigDict(frozen=True)

    name: str = Field("utm", description="Cookie name")
    lifetime: int = Field(604800, ge=0, description="Cookie lifetime in seconds")
    path: str = Field("/", description="Cookie path")
    domain: str = Field("", description="Cookie domain, empty for current host")
    overwrite: bool = Field(
        True, description="Any new UTM value replaces all stored values"
    )
    secure: bool = False
    httponly: bool = False
    auto_init: bool = Field(True, description="Initialize on every request")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> UtmCookieSettings:
    """Load settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        UtmCookieSettings with defaults for unset variables

    Raises:
        InvalidConfiguration: If a variable cannot be parsed or is out of range
    """
    environ = os.environ if environ is None else environ

    raw = {}
    for field_name in UtmCookieSettings.model_fields:
        value = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            raw[field_name] = value

    try:
        return UtmCookieSettings(**raw)
    except ValidationError as exc:
        error = exc.errors()[0]
        field_name = str(error["loc"][0]) if error["loc"] else "settings"
        raise InvalidConfiguration(
            f"{ENV_PREFIX}{field_name.upper()}",
            raw.get(field_name),
            error["msg"],
        ) from exc


def configure_utm_cookie(engine: UtmCookie, settings: UtmCookieSettings) -> UtmCookie:
    """Apply settings to an engine through its setters.

    Raises:
        InvalidConfiguration: If the engine rejects a value (e.g. lifetime 0)
    """
    engine.set_name(settings.name)
    engine.set_lifetime(settings.lifetime)
    engine.set_path(settings.path)
    engine.set_domain(settings.domain)
    engine.set_overwrite(settings.overwrite)
    engine.set_secure(settings.secure)
    engine.set_http_only(settings.httponly)
    return engine
