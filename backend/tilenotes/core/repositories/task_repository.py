from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tilenotes.core.models.task import Task


class TaskRepository(ABC):
    """Abstract repository interface for tasks."""

    @abstractmethod
    async def create(self, task: Task) -> Task:  # pragma: no cover - interface only
        ...

    @abstractmethod
    async def create_many(self, tasks: Sequence[Task]) -> Sequence[Task]:  # pragma: no cover
        """Insert several tasks in one round-trip."""

    @abstractmethod
    async def get(self, task_id: UUID) -> Task | None:  # pragma: no cover
        ...

    @abstractmethod
    async def list(
        self,
        *,
        user_id: UUID,
        note_id: UUID | None = None,
        limit: int = 500,
    ) -> Sequence[Task]:  # pragma: no cover
        """Return the owner's tasks newest first, optionally only those of one note."""

    @abstractmethod
    async def update_fields(self, task_id: UUID, changes: dict[str, Any]) -> Task | None:  # pragma: no cover
        ...

    @abstractmethod
    async def delete(self, task_id: UUID) -> bool:  # pragma: no cover
        ...

    @abstractmethod
    async def delete_for_user(self, user_id: UUID) -> int:  # pragma: no cover
        ...
