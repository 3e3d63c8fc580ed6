from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from tilenotes.core.models.task import Task, TaskPriority

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tilenotes.api.v1.schemas.task import TaskCreate, TaskUpdate
    from tilenotes.core.repositories.task_repository import TaskRepository


class TaskService:
    """Task CRUD with ownership checks, mirroring NoteService."""

    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    async def create_task(self, create_dto: TaskCreate, user_id: UUID) -> Task:
        task = Task(
            id=uuid4(),
            user_id=user_id,
            note_id=create_dto.note_id,
            title=create_dto.title,
            description=create_dto.description,
            due_date=create_dto.due_date,
            reminder_time=create_dto.reminder_time,
            priority=create_dto.priority or TaskPriority.MEDIUM,
            is_completed=False,
        )
        return await self._repo.create(task)

    async def create_extracted_tasks(
        self,
        *,
        user_id: UUID,
        note_id: UUID,
        titles: Iterable[str],
    ) -> Sequence[Task]:
        """Insert one incomplete, medium-priority task per extracted phrase."""
        tasks = [
            Task(
                id=uuid4(),
                user_id=user_id,
                note_id=note_id,
                title=title.strip()[:500],
                is_completed=False,
                priority=TaskPriority.MEDIUM,
            )
            for title in titles
            if title and title.strip()
        ]
        if not tasks:
            return []
        return await self._repo.create_many(tasks)

    async def get_task(self, task_id: str | UUID, user_id: UUID) -> Task | None:
        try:
            task_uuid = UUID(str(task_id))
        except ValueError:
            return None
        task = await self._repo.get(task_uuid)
        if task and task.user_id == user_id:
            return task
        return None

    async def list_tasks(self, user_id: UUID, *, note_id: UUID | None = None) -> Sequence[Task]:
        return await self._repo.list(user_id=user_id, note_id=note_id)

    async def update_task(self, task_id: str | UUID, update_dto: TaskUpdate, user_id: UUID) -> Task | None:
        existing = await self.get_task(task_id, user_id)
        if not existing:
            return None
        changes = update_dto.model_dump(exclude_unset=True)
        if "title" in changes and changes["title"] is None:
            changes.pop("title")
        if "priority" in changes and changes["priority"] is None:
            changes.pop("priority")
        if "is_completed" in changes:
            if changes["is_completed"] is None:
                changes.pop("is_completed")
            else:
                changes.update(self._completion_changes(changes["is_completed"]))
        if not changes:
            return existing
        return await self._repo.update_fields(existing.id, changes)

    async def set_completed(self, task_id: str | UUID, completed: bool, user_id: UUID) -> Task | None:
        existing = await self.get_task(task_id, user_id)
        if not existing:
            return None
        return await self._repo.update_fields(existing.id, self._completion_changes(completed))

    async def delete_task(self, task_id: str | UUID, user_id: UUID) -> bool:
        existing = await self.get_task(task_id, user_id)
        if not existing:
            return False
        return await self._repo.delete(existing.id)

    async def delete_all(self, user_id: UUID) -> int:
        return await self._repo.delete_for_user(user_id)

    @staticmethod
    def _completion_changes(completed: bool) -> dict:
        return {
            "is_completed": completed,
            "completed_at": datetime.now(UTC) if completed else None,
        }
