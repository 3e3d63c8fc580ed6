from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from tilenotes.api.v1.schemas.settings import DataExport, DeleteAllResponse
from tilenotes.core.models.settings import UserSettings
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from tilenotes.api.v1.schemas.settings import UserSettingsUpdate
    from tilenotes.core.repositories.settings_repository import SettingsRepository
    from tilenotes.core.services.note_service import NoteService
    from tilenotes.core.services.task_service import TaskService

logger = get_logger(__name__)

EXPORT_VERSION = "1.0"


class SettingsService:
    """User preferences plus the account-wide export and wipe operations."""

    def __init__(
        self,
        repo: SettingsRepository,
        note_service: NoteService,
        task_service: TaskService,
    ) -> None:
        self._repo = repo
        self._notes = note_service
        self._tasks = task_service

    async def get_or_create(self, user_id: UUID) -> UserSettings:
        existing = await self._repo.get(user_id)
        if existing is not None:
            return existing
        logger.info("Creating default settings", extra={"user_id": str(user_id)})
        return await self._repo.create(UserSettings(user_id=user_id))

    async def update(self, user_id: UUID, update_dto: UserSettingsUpdate) -> UserSettings:
        current = await self.get_or_create(user_id)
        changes = {k: v for k, v in update_dto.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            return current
        updated = await self._repo.update_fields(user_id, changes)
        return updated or current.model_copy(update=changes)

    async def export_data(self, user_id: UUID) -> DataExport:
        notes = await self._notes.list_notes(user_id, include_archived=True)
        tasks = await self._tasks.list_tasks(user_id)
        user_settings = await self._repo.get(user_id)
        return DataExport(
            notes=[n.model_dump(mode="json") for n in notes],
            tasks=[t.model_dump(mode="json") for t in tasks],
            settings=user_settings.model_dump(mode="json") if user_settings else None,
            export_date=datetime.now(UTC),
            version=EXPORT_VERSION,
        )

    async def delete_all_data(self, user_id: UUID) -> DeleteAllResponse:
        """Wipe the account's rows: tasks, then notes, then settings."""
        tasks_deleted = await self._tasks.delete_all(user_id)
        notes_deleted = await self._notes.delete_all(user_id)
        settings_deleted = await self._repo.delete(user_id)
        logger.warning(
            "Deleted all user data",
            extra={"user_id": str(user_id), "notes": notes_deleted, "tasks": tasks_deleted},
        )
        return DeleteAllResponse(
            notes_deleted=notes_deleted,
            tasks_deleted=tasks_deleted,
            settings_deleted=settings_deleted,
        )
