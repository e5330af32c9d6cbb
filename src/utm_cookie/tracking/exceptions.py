"""Custom exceptions for the UTM cookie engine."""


class UtmCookieError(Exception):
    """Base exception for all UTM cookie errors."""


class InvalidConfiguration(UtmCookieError, ValueError):
    """Raised when a setting is given an out-of-domain value."""

    def __init__(self, setting: str, value: object, reason: str):
        self.setting = setting
        self.value = value
        super().__init__(
            f"{setting} has unexpected value {value!r}. {reason}"
        )


class UnknownKey(UtmCookieError, LookupError):
    """Raised when a UTM value is requested under a non-canonical key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"Argument key has unexpected value {key!r}. "
            f"Utm value with key {key!r} does not exist."
        )
