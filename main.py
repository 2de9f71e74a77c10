"""
Task API application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.routes import router as tasks_router
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.session import Database

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("aiosqlite", "sqlalchemy.engine", "httpx"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.database_url)
        try:
            await database.open()
        except Exception:
            logger.exception("Error initializing database server")
            raise
        app.state.database = database

        if settings.uses_default_secret:
            logger.warning("JWT_SECRET is not set; signing tokens with the built-in placeholder secret")
        if settings.jwt_expiry_seconds is None:
            logger.info("Tokens are issued without an expiry claim")
        logger.info("Server starts at http://localhost:%d", settings.port)
        try:
            yield
        finally:
            await database.close()

    app = FastAPI(
        title="Task API",
        version="1.0.0",
        description="User registration/login and CRUD on shared tasks.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_middleware(app, settings.cors_origins)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router)
    app.include_router(tasks_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
