"""
Tests for utility functions.
"""
import time

import pytest

from tokenlayer_sdk.utils import now_nonce, to_int, to_non_negative_int, to_chain_id_hex, sanitize_payload


def test_now_nonce_is_milliseconds():
    before = int(time.time() * 1000)
    nonce = now_nonce()
    after = int(time.time() * 1000)
    assert before <= nonce <= after


@pytest.mark.parametrize("value,expected", [
    (42, 42),
    ("42", 42),
    (" 42 ", 42),
    ("0x2a", 42),
    ("0X2A", 42),
    ("123456789012345678901234567890", 123456789012345678901234567890),
])
def test_to_int(value, expected):
    assert to_int(value) == expected


@pytest.mark.parametrize("value", [True, None, 1.5, "abc", "0xzz"])
def test_to_int_invalid(value):
    with pytest.raises(ValueError):
        to_int(value)


def test_to_non_negative_int():
    assert to_non_negative_int("0", "fee") == 0
    with pytest.raises(ValueError) as excinfo:
        to_non_negative_int(-3, "fee")
    assert "fee" in str(excinfo.value)


@pytest.mark.parametrize("value", [8453, "8453", "0x2105"])
def test_to_chain_id_hex(value):
    assert to_chain_id_hex(value) == "0x2105"


def test_sanitize_payload():
    payload = {
        "signature": "0x" + "ab" * 65,
        "nonce": 1,
        "action": {"type": "register", "message": "hello", "signature": "0x01"},
    }
    sanitized = sanitize_payload(payload)

    assert sanitized["signature"] == "[REDACTED - 132 chars]"
    assert sanitized["nonce"] == 1
    assert sanitized["action"]["type"] == "register"
    assert sanitized["action"]["message"] == "[REDACTED - 5 chars]"
    assert payload["action"]["message"] == "hello"


def test_sanitize_non_dict():
    assert sanitize_payload(["a"]) == {"type": str(list)}
