"""
Utility functions for the Token Layer SDK.
"""
import time
from typing import Any, Dict, Union

from web3 import Web3

_REDACTED_KEYS = ("signature", "message")


def now_nonce() -> int:
    """Timestamp-derived nonce in milliseconds since the epoch"""
    return int(time.time() * 1000)


def to_int(value: Union[int, str]) -> int:
    """
    Convert an integer or a decimal/0x-hex string to int.

    Raises:
        ValueError: If the value cannot be interpreted as an integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    raise ValueError(f"Expected an integer, got {value!r}")


def to_non_negative_int(value: Union[int, str], field: str) -> int:
    """Like to_int but rejects negative values"""
    number = to_int(value)
    if number < 0:
        raise ValueError(f"{field} must be a non-negative integer, got {value!r}")
    return number


def to_chain_id_hex(chain_id: Union[int, str]) -> str:
    """Normalize a chain id given as int, decimal string or hex string to 0x-hex"""
    return Web3.to_hex(to_int(chain_id))


def sanitize_payload(payload: Any) -> Dict[str, Any]:
    """
    Remove signatures and signed messages from a request body for logging

    Args:
        payload: Request body to sanitize

    Returns:
        Sanitized copy safe to log
    """
    if not isinstance(payload, dict):
        return {"type": str(type(payload))}

    result = payload.copy()
    for key in _REDACTED_KEYS:
        if key in result:
            result[key] = f"[REDACTED - {len(str(result[key]))} chars]"

    if isinstance(result.get("action"), dict):
        result["action"] = sanitize_payload(result["action"])

    return result
