"""
Async SQLAlchemy engine lifecycle and per-request sessions.

The engine is owned by a ``Database`` instance that the application opens
on startup and closes on shutdown; it lives on ``app.state`` rather than
at module level.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from database.errors import StoreError
from database.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the single engine shared by every request."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def open(self) -> None:
        self._engine = create_async_engine(self.url, echo=self.echo)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        # CREATE TABLE IF NOT EXISTS for every model
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database ready at %s", self.url)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database connection closed")
        self._engine = None
        self._session_factory = None

    async def __aenter__(self) -> "Database":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory


async def commit_or_raise(session: AsyncSession) -> None:
    """Commit the current write, rolling back and raising ``StoreError`` on failure."""
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StoreError(str(exc)) from exc


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`.

    Repositories commit their own writes before the handler returns, so
    the exit code here only rolls back and closes.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
