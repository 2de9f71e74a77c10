"""
Error kinds and their mapping to HTTP responses.

Handlers raise ``AppError`` with a kind; the exception handlers registered
here turn it into a status code and a user-facing message, and log the
internal detail separately.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from database.errors import StoreError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIAL = "invalid_credential"
    STORE_ERROR = "store_error"


STATUS_BY_KIND = {
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_CREDENTIAL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_REDACTED_STORE_MESSAGE = "Internal server error"


class AppError(Exception):
    """A failure with a user-facing ``message`` and an internal ``detail``."""

    def __init__(self, kind: ErrorKind, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


def _expose_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.expose_error_details)


def _store_error_response(request: Request, detail: str) -> Response:
    logger.error("%s %s failed: %s", request.method, request.url.path, detail)
    message = detail if _expose_details(request) else _REDACTED_STORE_MESSAGE
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )


async def app_error_handler(request: Request, exc: AppError) -> Response:
    if exc.kind is ErrorKind.STORE_ERROR:
        return _store_error_response(request, exc.detail or exc.message)
    logger.warning(
        "%s %s → %s (%s)",
        request.method, request.url.path, exc.kind.value, exc.detail or exc.message,
    )
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def store_error_handler(request: Request, exc: StoreError) -> Response:
    return await app_error_handler(
        request, AppError(ErrorKind.STORE_ERROR, _REDACTED_STORE_MESSAGE, detail=str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
