"""
JWT creation and verification.

Tokens are compact HS256 JWTs (``header.payload.signature``, base64url)
signed with HMAC-SHA256. The payload carries ``userId`` and ``iat``, and
``exp`` only when an expiry is configured. Without one a token stays
valid until the secret changes.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Dict, Optional

_HEADER = {"alg": "HS256", "typ": "JWT"}


class TokenError(Exception):
    """Base class for every verification failure."""


class TokenMalformed(TokenError):
    pass


class TokenInvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass


def _b64encode(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return urlsafe_b64decode(padded.encode())


def _sign(signing_input: bytes, secret: str) -> str:
    return _b64encode(hmac.new(secret.encode(), signing_input, hashlib.sha256).digest())


def create_token(user_id: int, secret: str, expires_in: Optional[int] = None) -> str:
    """Create a signed token for ``user_id``; ``expires_in`` is in seconds."""
    now = int(time.time())
    payload: Dict[str, Any] = {"userId": user_id, "iat": now}
    if expires_in is not None:
        payload["exp"] = now + expires_in

    header_seg = _b64encode(json.dumps(_HEADER, separators=(",", ":")).encode())
    payload_seg = _b64encode(json.dumps(payload, separators=(",", ":")).encode())
    signing_input = f"{header_seg}.{payload_seg}".encode()
    return f"{header_seg}.{payload_seg}.{_sign(signing_input, secret)}"


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    """
    Verify ``token`` and return its payload.

    Raises ``TokenMalformed``, ``TokenInvalidSignature`` or ``TokenExpired``.
    """
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise TokenMalformed("token must have three segments")
    header_seg, payload_seg, sig_seg = parts

    try:
        header = json.loads(_b64decode(header_seg))
    except ValueError as exc:
        raise TokenMalformed(f"bad header: {exc}") from exc
    if not isinstance(header, dict) or header.get("alg") != "HS256":
        raise TokenMalformed("unsupported algorithm")

    expected_sig = _sign(f"{header_seg}.{payload_seg}".encode(), secret)
    if not hmac.compare_digest(sig_seg.encode(), expected_sig.encode()):
        raise TokenInvalidSignature("signature mismatch")

    try:
        payload = json.loads(_b64decode(payload_seg))
    except ValueError as exc:
        raise TokenMalformed(f"bad payload: {exc}") from exc
    if not isinstance(payload, dict):
        raise TokenMalformed("payload is not an object")

    exp = payload.get("exp")
    if exp is not None and exp < time.time():
        raise TokenExpired("token expired")
    return payload


def verify_token(token: str, secret: str) -> int:
    """Verify ``token`` and return the embedded user id."""
    payload = decode_token(token, secret)
    user_id = payload.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise TokenMalformed("missing userId claim")
    return user_id
