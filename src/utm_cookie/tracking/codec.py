"""Cookie wire format for UTM attribution records.

The cookie value is a compact JSON object keyed by the canonical UTM names:

    {"utm_source":"google","utm_medium":"cpc"}

Absent values are omitted when encoding. Decoding is fail-open: anything that
is not a JSON object yields an empty mapping instead of an error, since
attribution is best-effort.
"""
import json
import logging
from typing import Mapping, Optional


logger = logging.getLogger(__name__)

UTM_PREFIX = "utm_"

UTM_KEYS: tuple[str, ...] = (
    "utm_campaign",
    "utm_medium",
    "utm_source",
    "utm_term",
    "utm_content",
)


def empty_record() -> dict[str, Optional[str]]:
    return {key: None for key in UTM_KEYS}


def normalize_key(key: str) -> str:
    """Prefix a short key ("source") with utm_ unless it already has it."""
    if key.startswith(UTM_PREFIX):
        return key
    return UTM_PREFIX + key


def encode_record(record: Mapping[str, Optional[str]]) -> str:
    """Encode an attribution record as a compact JSON cookie value.

    Args:
        record: Mapping of canonical UTM keys to values (None = absent)

    Returns:
        JSON text with keys in canonical order and None values omitted
    """
    payload = {
        key: record[key] for key in UTM_KEYS if record.get(key) is not None
    }
    return json.dumps(payload, separators=(",", ":"))


def decode_record(raw: Optional[str]) -> dict[str, str]:
    """Decode a raw cookie value into canonical UTM key/value pairs.

    Unknown keys are ignored. String values are kept, numbers are
    stringified, anything else (null, lists, objects, booleans) is dropped.

    Args:
        raw: Cookie value as sent by the client, or None if absent

    Returns:
        dict of present values only (possibly empty)
    """
    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.debug("Ignoring malformed UTM cookie payload: %s", exc)
        return {}

    if not isinstance(data, dict):
        logger.debug("Ignoring UTM cookie payload of type %s", type(data).__name__)
        return {}

    decoded: dict[str, str] = {}
    for key in UTM_KEYS:
        value = data.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            value = str(value)
        if isinstance(value, str):
            decoded[key] = value

    return decoded
