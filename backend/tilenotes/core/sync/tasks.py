from __future__ import annotations

from typing import TYPE_CHECKING

from tilenotes.core.errors import TaskNotFoundError
from tilenotes.core.sync.collection import TaskCollection

if TYPE_CHECKING:
    from uuid import UUID

    from tilenotes.api.v1.schemas.task import TaskCreate, TaskUpdate
    from tilenotes.core.models.task import Task
    from tilenotes.core.services.task_service import TaskService


class TaskSynchronizer:
    """Task counterpart of NoteSynchronizer: remote write first, cache second."""

    def __init__(
        self,
        service: TaskService,
        user_id: UUID,
        collection: TaskCollection | None = None,
    ) -> None:
        self._service = service
        self._user_id = user_id
        self.collection = collection if collection is not None else TaskCollection()

    @property
    def tasks(self) -> list[Task]:
        return self.collection.items

    async def reload(self) -> list[Task]:
        tasks = await self._service.list_tasks(self._user_id)
        self.collection.reset(tasks)
        return self.collection.items

    async def create(self, create_dto: TaskCreate) -> Task:
        task = await self._service.create_task(create_dto, self._user_id)
        self.collection.insert(task)
        return task

    async def update(self, task_id: UUID, update_dto: TaskUpdate) -> Task:
        task = await self._service.update_task(task_id, update_dto, self._user_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        self.collection.replace(task)
        return task

    async def toggle(self, task_id: UUID, completed: bool) -> Task:
        task = await self._service.set_completed(task_id, completed, self._user_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        self.collection.replace(task)
        return task

    async def delete(self, task_id: UUID) -> None:
        if not await self._service.delete_task(task_id, self._user_id):
            raise TaskNotFoundError(f"Task {task_id} not found")
        self.collection.remove(task_id)

    def forget_note(self, note_id: UUID) -> None:
        """Drop tasks of a deleted note; the store cascades the delete."""
        for task in self.collection.items:
            if task.note_id == note_id:
                self.collection.remove(task.id)
