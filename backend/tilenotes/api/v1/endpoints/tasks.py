from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, Query, status

from tilenotes.api.v1.schemas.task import TaskCreate, TaskRead, TaskStats, TaskToggleRequest, TaskUpdate
from tilenotes.core.schemas.filters import TaskFilter, TaskStatus
from tilenotes.core.services.filter_service import filter_tasks, task_stats
from tilenotes.core.sync.tasks import TaskSynchronizer  # noqa: TCH001
from tilenotes.dependencies import get_task_synchronizer

router = APIRouter()


@router.get("/", response_model=list[TaskRead])
async def list_tasks(
    status_filter: TaskStatus = Query(default=TaskStatus.ALL, alias="status"),
    q: str | None = None,
    note_id: UUID | None = None,
    sync: TaskSynchronizer = Depends(get_task_synchronizer),
):
    """Task list, overdue first, then by due date."""
    tasks = await sync.reload()
    task_filter = TaskFilter(status=status_filter, query=q, note_id=str(note_id) if note_id else None)
    return [TaskRead.model_validate(t) for t in filter_tasks(tasks, task_filter)]


@router.get("/stats", response_model=TaskStats)
async def get_task_stats(sync: TaskSynchronizer = Depends(get_task_synchronizer)):
    tasks = await sync.reload()
    return TaskStats(**task_stats(tasks))


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    sync: TaskSynchronizer = Depends(get_task_synchronizer),
):
    task = await sync.create(payload)
    return TaskRead.model_validate(task)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    sync: TaskSynchronizer = Depends(get_task_synchronizer),
):
    task = await sync.update(task_id, payload)
    return TaskRead.model_validate(task)


@router.post("/{task_id}/toggle", response_model=TaskRead)
async def toggle_task(
    task_id: UUID,
    payload: TaskToggleRequest,
    sync: TaskSynchronizer = Depends(get_task_synchronizer),
):
    task = await sync.toggle(task_id, payload.completed)
    return TaskRead.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    sync: TaskSynchronizer = Depends(get_task_synchronizer),
):
    await sync.delete(task_id)
    return None
