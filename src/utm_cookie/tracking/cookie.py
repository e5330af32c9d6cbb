"""UTM attribution cookie engine.

Merges UTM parameters from the current query string with the values stored
in the visitor's attribution cookie and queues a cookie write whenever a new
parameter shows up.

Merge policy:
- Overwrite on + any UTM parameter in the query: the query values replace the
  stored record entirely (stored keys missing from the query are dropped)
- Otherwise: stored values overlaid with query values, query wins per key
"""
import html
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

from ..schemas.cookie import CookieInstruction
from .codec import UTM_KEYS, decode_record, empty_record, encode_record, normalize_key
from .exceptions import InvalidConfiguration, UnknownKey


logger = logging.getLogger(__name__)

_EXPIRED_AT = datetime(1970, 1, 1, tzinfo=timezone.utc)


def html_sanitize(value: str) -> str:
    """Escape HTML special characters, quotes included."""
    return html.escape(value, quote=True)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _remove_empty_values(values: Mapping[str, Optional[str]]) -> dict[str, str]:
    return {key: value for key, value in values.items() if value}


class UtmCookie:
    """Per-request UTM attribution state backed by a browser cookie."""

    DEFAULT_NAME = "utm"
    DEFAULT_LIFETIME_SECONDS = 604800  # 7 days

    def __init__(
        self,
        cookies: Optional[Mapping[str, str]] = None,
        query_params: Optional[Mapping[str, str]] = None,
        sanitizer: Optional[Callable[[str], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize engine for a single request.

        Args:
            cookies: Incoming request cookies (name -> raw value)
            query_params: Incoming query string parameters
            sanitizer: String filter applied to untrusted values (HTML escaping)
            clock: Returns the current timezone-aware UTC datetime
            logger_instance: Optional logger
        """
        self.cookies = cookies or {}
        self.query_params = query_params or {}
        self.sanitizer = sanitizer or html_sanitize
        self.clock = clock or _utc_now
        self.logger = logger_instance or logger

        self.pending_cookies: list[CookieInstruction] = []
        self._record: Optional[dict[str, Optional[str]]] = None

        self.path = "/"
        self.domain = ""
        self.secure = False
        self.http_only = False
        self.set_name(self.DEFAULT_NAME)
        self.set_lifetime(self.DEFAULT_LIFETIME_SECONDS)
        self.set_overwrite(True)

    @property
    def is_initialized(self) -> bool:
        return self._record is not None

    def set_name(self, name: str) -> None:
        """Set the cookie name; cancels any previous init."""
        if name.strip() == "":
            raise InvalidConfiguration("Name", name, "Value can't be empty.")
        self.name = name
        self._record = None

    def set_lifetime(self, seconds: int) -> None:
        """Set cookie lifetime in seconds (applies to the next write)."""
        if seconds <= 0:
            raise InvalidConfiguration("Lifetime", seconds, "Value must be positive.")
        self.lifetime = seconds

    def set_overwrite(self, overwrite: bool) -> None:
        """Set whether any new UTM value replaces all stored values; cancels any previous init."""
        self.overwrite = overwrite
        self._record = None

    def set_path(self, path: str) -> None:
        self.path = path

    def set_domain(self, domain: str) -> None:
        self.domain = domain

    def set_secure(self, secure: bool) -> None:
        self.secure = secure

    def set_http_only(self, http_only: bool) -> None:
        self.http_only = http_only

    def init(self) -> None:
        """Build the attribution record from the cookie and query string.

        No-op once a record is cached for this request.
        """
        if self._record is not None:
            return

        stored = self._read_cookie()
        from_query = self._read_query()

        record = empty_record()
        if from_query and self.overwrite:
            record.update(from_query)
        else:
            record.update(stored)
            record.update(from_query)

        if from_query:
            self._save(record)
        self._record = record

    def get(self, key: Optional[str] = None):
        """Get all UTM values or the value for one key.

        Args:
            key: Canonical key ("utm_source") or short form ("source").
                None returns every value.

        Returns:
            dict of all five keys, or the single value (None if absent)

        Raises:
            UnknownKey: If the key is not one of the five UTM keys
        """
        self.init()

        if key is None:
            return dict(self._record)

        key = normalize_key(key)
        if key not in self._record:
            raise UnknownKey(key)
        return self._record[key]

    def clear(self) -> None:
        """Queue an expiring cookie so the next request starts without attribution.

        The record cached for the current request is left as is.
        """
        self.logger.debug("Clearing UTM cookie %s", self.name)
        self.pending_cookies.append(self._instruction("", _EXPIRED_AT))

    def _read_cookie(self) -> dict[str, str]:
        decoded = decode_record(self.cookies.get(self.name))
        return _remove_empty_values(
            {key: self.sanitizer(value) for key, value in decoded.items()}
        )

    def _read_query(self) -> dict[str, str]:
        values: dict[str, Optional[str]] = {}
        for key in UTM_KEYS:
            value = self.query_params.get(key)
            values[key] = self.sanitizer(value) if value is not None else None
        return _remove_empty_values(values)

    def _save(self, record: dict[str, Optional[str]]) -> None:
        expires = self.clock() + timedelta(seconds=self.lifetime)
        self.logger.debug(
            "Writing UTM cookie %s: keys=%s, expires=%s",
            self.name,
            [key for key in UTM_KEYS if record[key] is not None],
            expires.isoformat(),
        )
        self.pending_cookies.append(self._instruction(encode_record(record), expires))

    def _instruction(self, value: str, expires: datetime) -> CookieInstruction:
        return CookieInstruction(
            name=self.name,
            value=value,
            expires=expires,
            path=self.path,
            domain=self.domain or None,
            secure=self.secure,
            httponly=self.http_only,
        )
