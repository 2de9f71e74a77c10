"""
FastAPI dependencies for authentication.

``get_current_user_id`` gates every protected route: a missing token is
rejected with 401, a token that fails verification with 403.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, Request

from api.errors import AppError, ErrorKind
from auth.jwt import TokenError, verify_token

logger = logging.getLogger(__name__)


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the part after the scheme in ``Bearer <token>``, if any."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> int:
    """
    Extract and verify the Bearer token, returning the authenticated
    user id. The id is also stored on ``request.state.user_id``.
    """
    token = _extract_token(authorization)
    if token is None:
        raise AppError(ErrorKind.UNAUTHORIZED, "Access denied", detail="missing bearer token")

    secret = request.app.state.settings.jwt_secret
    try:
        user_id = verify_token(token, secret)
    except TokenError as exc:
        raise AppError(
            ErrorKind.FORBIDDEN, "Invalid token", detail=f"{type(exc).__name__}: {exc}",
        ) from exc

    request.state.user_id = user_id
    return user_id
