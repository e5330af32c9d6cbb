"""Unit tests for the UTM cookie wire format."""
import json

import pytest

from src.utm_cookie.tracking.codec import (
    decode_record,
    empty_record,
    encode_record,
    normalize_key,
)


def test_round_trip_full_record():
    """Test a fully populated record survives encode/decode unchanged."""
    record = {
        "utm_campaign": "holiday_2024",
        "utm_medium": "cpc",
        "utm_source": "google",
        "utm_term": "red shoes",
        "utm_content": "banner-a",
    }

    assert decode_record(encode_record(record)) == record


def test_encode_omits_absent_values():
    record = empty_record()
    record["utm_source"] = "newsletter"

    assert encode_record(record) == '{"utm_source":"newsletter"}'


def test_encode_empty_record():
    assert encode_record(empty_record()) == "{}"


@pytest.mark.parametrize("raw", [None, "", "not-json", "[1, 2]", '"text"', "42"])
def test_decode_tolerates_malformed_payloads(raw):
    """Test anything that is not a JSON object decodes to empty."""
    assert decode_record(raw) == {}


def test_decode_filters_keys_and_values():
    """Test unknown keys and non-string values are dropped, numbers stringified."""
    raw = json.dumps(
        {
            "utm_campaign": 2024,
            "utm_medium": None,
            "utm_source": ["google"],
            "utm_term": True,
            "utm_content": "hero",
            "fbclid": "abc",
        }
    )

    assert decode_record(raw) == {"utm_campaign": "2024", "utm_content": "hero"}


def test_normalize_key():
    assert normalize_key("source") == "utm_source"
    assert normalize_key("utm_medium") == "utm_medium"
    assert normalize_key("bogus") == "utm_bogus"


def test_round_trip_non_ascii_values():
    """Test non-ASCII values are escaped to keep the cookie ASCII-only."""
    record = empty_record()
    record["utm_campaign"] = "日本"
    record["utm_term"] = "café"

    encoded = encode_record(record)

    assert encoded.isascii()
    assert "\\u65e5\\u672c" in encoded
    assert decode_record(encoded) == {"utm_campaign": "日本", "utm_term": "café"}
