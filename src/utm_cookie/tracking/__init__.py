"""UTM attribution tracking engine.

Keeps campaign attribution (utm_campaign, utm_medium, utm_source, utm_term,
utm_content) in a browser cookie across requests.
"""
from .codec import UTM_KEYS, decode_record, encode_record, normalize_key
from .cookie import UtmCookie, html_sanitize
from .exceptions import InvalidConfiguration, UnknownKey, UtmCookieError

__all__ = [
    "UTM_KEYS",
    "UtmCookie",
    "UtmCookieError",
    "InvalidConfiguration",
    "UnknownKey",
    "decode_record",
    "encode_record",
    "html_sanitize",
    "normalize_key",
]
