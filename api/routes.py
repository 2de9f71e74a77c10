"""
Task routes. Every route requires a valid bearer token.

Tasks are shared between all users; the authenticated id is not used
to filter or authorise access to individual tasks.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import AppError, ErrorKind
from auth.dependencies import get_current_user_id
from database.session import get_db_session
from database.tasks import TaskRepository
from utils.schemas import TaskOut, TaskRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    dependencies=[Depends(get_current_user_id)],
)


def get_task_repository(session: AsyncSession = Depends(get_db_session)) -> TaskRepository:
    return TaskRepository(session)


@router.post("", status_code=status.HTTP_201_CREATED, response_class=PlainTextResponse)
async def create_task(
    req: TaskRequest,
    repo: TaskRepository = Depends(get_task_repository),
) -> str:
    await repo.create(req.title, req.description)
    return "Task created successfully"


@router.get("", response_model=List[TaskOut], response_model_by_alias=True)
async def list_tasks(repo: TaskRepository = Depends(get_task_repository)) -> List[Dict[str, Any]]:
    tasks = await repo.list_all()
    return [t.to_dict() for t in tasks]


@router.get("/{task_id}", response_model=TaskOut, response_model_by_alias=True)
async def get_task(
    task_id: int,
    repo: TaskRepository = Depends(get_task_repository),
) -> Dict[str, Any]:
    task = await repo.get(task_id)
    if task is None:
        raise AppError(ErrorKind.NOT_FOUND, "Task not found", detail=f"task {task_id}")
    return task.to_dict()


@router.put("/{task_id}", response_class=PlainTextResponse)
async def update_task(
    task_id: int,
    req: TaskRequest,
    repo: TaskRepository = Depends(get_task_repository),
) -> str:
    # a missing id updates nothing and still succeeds
    await repo.update(task_id, req.title, req.description)
    return "Task updated successfully"


@router.delete("/{task_id}", response_class=PlainTextResponse)
async def delete_task(
    task_id: int,
    repo: TaskRepository = Depends(get_task_repository),
) -> str:
    await repo.delete(task_id)
    return "Task deleted successfully"
