"""
Auth API routes: register, login.

These routes are public; they never pass through the bearer-token gate.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import AppError, ErrorKind
from auth.jwt import create_token
from auth.password import verify_password_async
from database.session import get_db_session
from database.users import UserStore
from utils.schemas import LoginRequest, RegisterRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
)
async def register(
    req: RegisterRequest,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> str:
    """Register a new user. Duplicate emails fail as a store error."""
    settings = request.app.state.settings
    store = UserStore(session, bcrypt_rounds=settings.bcrypt_rounds)
    await store.register(req.username, req.email, req.password)
    return "User registered successfully"


@router.post("/login", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    """Login with email + password."""
    settings = request.app.state.settings
    user = await UserStore(session).find_by_email(req.email)
    if user is None:
        raise AppError(ErrorKind.NOT_FOUND, "User not found", detail=f"no user for {req.email}")

    if not await verify_password_async(req.password, user.password):
        raise AppError(
            ErrorKind.INVALID_CREDENTIAL, "Invalid credentials",
            detail=f"password mismatch for user {user.id}",
        )

    token = create_token(user.id, settings.jwt_secret, expires_in=settings.jwt_expiry_seconds)
    logger.info("Login: %s (%s)", user.username, user.id)
    return {"token": token}
