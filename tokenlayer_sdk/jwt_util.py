"""
JWT helpers for bearer credentials.

Token Layer validates JWTs server-side; the SDK only peeks at claims to
warn callers early. Signatures are never verified here.
"""
import logging
import time
from typing import Any, Dict, Optional

import jwt

logger = logging.getLogger(__name__)


def decode_unverified_claims(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode JWT claims without verifying the signature.

    Args:
        token: Bearer token

    Returns:
        Claims dictionary, or None if the token is not a decodable JWT
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    return claims if isinstance(claims, dict) else None


def get_token_expiry(token: str) -> Optional[int]:
    """Return the ``exp`` claim of a JWT, or None if absent or undecodable"""
    claims = decode_unverified_claims(token)
    if not claims:
        return None
    exp = claims.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        return int(exp)
    return None


def is_token_expired(token: str, now: Optional[float] = None) -> bool:
    """
    Check whether a JWT's ``exp`` claim is in the past.

    Tokens without a readable ``exp`` claim are treated as not expired.
    """
    exp = get_token_expiry(token)
    if exp is None:
        return False
    current = time.time() if now is None else now
    return exp <= current
