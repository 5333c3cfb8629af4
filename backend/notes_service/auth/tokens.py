"""
Notes Service — Signed Token Verifier
=======================================

What:  Verifies compact HS256 bearer tokens (header.payload.signature).
Why:   Every /api/notes request is gated on a token signed with the shared secret.
How:   Recomputes HMAC-SHA256 over "header.payload", compares it with the supplied
       signature in constant time, decodes the payload and checks `exp`.
Who:   Called by the bearer guard dependency in notes_service.auth.dependencies.
When:  Once per authenticated request.

Rejection Model:
    Every failure (wrong segment count, bad base64url, bad JSON, non-object payload,
    signature mismatch, expired or malformed `exp`) collapses into a single outcome:
    `None`. Callers cannot tell which step failed, so the response cannot be used
    as an oracle. The reason is logged at DEBUG level for operators.

Expiry Policy:
    A numeric `exp` strictly less than the current Unix time (seconds) is expired.
    A token without `exp` never expires unless `require_exp=True`.

The verifier is a pure function of (token, secret, now): no I/O, no shared
mutable state, safe to call from any number of concurrent requests.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import math
import time
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

Claims = Dict[str, Any]

TOKEN_SEGMENTS = 3


def b64url_encode(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """
    Base64url decode with padding restoration.

    Raises binascii.Error (a ValueError) on characters outside the alphabet
    or an impossible length.
    """
    standard = segment.replace("-", "+").replace("_", "/")
    standard += "=" * (-len(standard) % 4)
    return base64.b64decode(standard, validate=True)


def sign(signing_input: str, secret: bytes) -> str:
    """Return the unpadded base64url HMAC-SHA256 signature of `signing_input`."""
    digest = hmac.new(secret, signing_input.encode("utf-8"), hashlib.sha256).digest()
    return b64url_encode(digest)


def _reject(reason: str) -> None:
    logger.debug("Token rejected: %s", reason)
    return None


def verify_token(
    token: str,
    secret: bytes,
    *,
    now: Optional[int] = None,
    require_exp: bool = False,
) -> Optional[Claims]:
    """
    Verify a compact signed token and return its claims, or None if rejected.

    Args:
        token:       "header.payload.signature", each segment unpadded base64url
        secret:      HMAC key bytes
        now:         current Unix time in seconds (defaults to time.time())
        require_exp: reject tokens that carry no `exp` claim

    Returns:
        The decoded payload object, unmodified, or None on any failure.
    """
    if not isinstance(token, str):
        return _reject("token is not a string")

    parts = token.split(".")
    if len(parts) != TOKEN_SEGMENTS:
        return _reject(f"expected {TOKEN_SEGMENTS} segments, got {len(parts)}")

    header_b64, payload_b64, signature = parts
    expected = sign(f"{header_b64}.{payload_b64}", secret)

    # Bytes on both sides: compare_digest refuses non-ASCII str input
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
        return _reject("signature mismatch")

    # Deeply nested JSON exhausts the parser stack with RecursionError
    try:
        payload = json.loads(b64url_decode(payload_b64))
    except (binascii.Error, ValueError, RecursionError) as e:
        return _reject(f"undecodable payload ({type(e).__name__})")

    if not isinstance(payload, dict):
        return _reject("payload is not a JSON object")

    if "exp" not in payload:
        if require_exp:
            return _reject("missing exp")
        return payload

    exp = payload["exp"]
    # bool is an int subclass; true/false is not a timestamp
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return _reject("exp is not numeric")
    # NaN and Infinity parse as floats; huge ints would overflow isfinite()
    if isinstance(exp, float) and not math.isfinite(exp):
        return _reject("exp is not finite")

    current = int(time.time()) if now is None else now
    if exp < current:
        return _reject("token expired")

    return payload


class TokenVerifier:
    """
    Holds the signing secret and expiry policy for the running process.

    Built once from Settings in the app factory and stored on app.state;
    read-only afterwards.
    """

    def __init__(self, secret: bytes, require_exp: bool = False):
        if not secret:
            raise ValueError("TokenVerifier requires a non-empty secret")
        self._secret = bytes(secret)
        self.require_exp = require_exp

    def verify(self, token: str, now: Optional[int] = None) -> Optional[Claims]:
        return verify_token(token, self._secret, now=now, require_exp=self.require_exp)

    def __repr__(self) -> str:
        return f"<TokenVerifier(require_exp={self.require_exp})>"
