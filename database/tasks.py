"""
CRUD repository for the ``tasks`` table.

Tasks are shared: nothing here filters by the authenticated user.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.errors import StoreError
from database.models import Task
from database.session import commit_or_raise

logger = logging.getLogger(__name__)


class TaskRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, title: str, description: str) -> Task:
        task = Task(title=title, description=description)
        self._session.add(task)
        try:
            await self._session.flush()
            # pick up the server-assigned createdAt
            await self._session.refresh(task)
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StoreError(str(exc)) from exc
        await commit_or_raise(self._session)
        logger.debug("Created task %s", task.id)
        return task

    async def list_all(self) -> List[Task]:
        try:
            result = await self._session.execute(select(Task).order_by(Task.id))
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return list(result.scalars().all())

    async def get(self, task_id: int) -> Optional[Task]:
        try:
            return await self._session.get(Task, task_id)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    async def update(self, task_id: int, title: str, description: str) -> int:
        """Overwrite title/description. Returns rows affected (0 if ``task_id`` is unknown)."""
        stmt = (
            update(Task)
            .where(Task.id == task_id)
            .values(title=title, description=description)
            .execution_options(synchronize_session="evaluate")
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StoreError(str(exc)) from exc
        await commit_or_raise(self._session)
        if result.rowcount == 0:
            logger.debug("Update on missing task %s, no rows affected", task_id)
        return result.rowcount

    async def delete(self, task_id: int) -> int:
        """Remove a task. Returns rows affected (0 if ``task_id`` is unknown)."""
        stmt = (
            delete(Task)
            .where(Task.id == task_id)
            .execution_options(synchronize_session="evaluate")
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StoreError(str(exc)) from exc
        await commit_or_raise(self._session)
        if result.rowcount == 0:
            logger.debug("Delete on missing task %s, no rows affected", task_id)
        return result.rowcount
