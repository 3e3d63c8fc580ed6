from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tilenotes.core.models.task import Task
from tilenotes.core.repositories.implementations.supabase.base import SupabaseTableRepository
from tilenotes.core.repositories.task_repository import TaskRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseTaskRepository(SupabaseTableRepository, TaskRepository):
    """PostgREST-backed access to the `tasks` table."""

    TABLE_NAME = "tasks"
    IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})

    def _task_row(self, task: Task) -> dict[str, Any]:
        return self._to_row(task, drop_none=("updated_at", "completed_at"))

    async def create(self, task: Task) -> Task:
        row = self._task_row(task)
        resp = await self._run(lambda: self._table().insert(row).execute())
        rows = self._rows(resp)
        return self._to_model(Task, rows[0]) if rows else task

    async def create_many(self, tasks: Sequence[Task]) -> Sequence[Task]:
        if not tasks:
            return []
        payload = [self._task_row(t) for t in tasks]
        resp = await self._run(lambda: self._table().insert(payload).execute())
        return [self._to_model(Task, r) for r in self._rows(resp)]

    async def get(self, task_id: UUID) -> Task | None:
        resp = await self._run(
            lambda: self._table().select("*").eq("id", str(task_id)).limit(1).execute()
        )
        rows = self._rows(resp)
        return self._to_model(Task, rows[0]) if rows else None

    async def list(
        self,
        *,
        user_id: UUID,
        note_id: UUID | None = None,
        limit: int = 500,
    ) -> Sequence[Task]:
        def _query():
            q = self._table().select("*").eq("user_id", str(user_id))
            if note_id is not None:
                q = q.eq("note_id", str(note_id))
            return q.order("created_at", desc=True).limit(limit).execute()

        resp = await self._run(_query)
        return [self._to_model(Task, r) for r in self._rows(resp)]

    async def update_fields(self, task_id: UUID, changes: dict[str, Any]) -> Task | None:
        sanitized = {
            k: self._jsonable(v)
            for k, v in (changes or {}).items()
            if k not in self.IMMUTABLE_FIELDS
        }
        if not sanitized:
            return await self.get(task_id)
        resp = await self._run(
            lambda: self._table().update(sanitized).eq("id", str(task_id)).execute()
        )
        rows = self._rows(resp)
        return self._to_model(Task, rows[0]) if rows else None

    async def delete(self, task_id: UUID) -> bool:
        resp = await self._run(lambda: self._table().delete().eq("id", str(task_id)).execute())
        return len(self._rows(resp)) > 0

    async def delete_for_user(self, user_id: UUID) -> int:
        resp = await self._run(
            lambda: self._table().delete().eq("user_id", str(user_id)).execute()
        )
        return len(self._rows(resp))
