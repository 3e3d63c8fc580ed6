from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tilenotes.core.models.settings import UserSettings
from tilenotes.core.repositories.implementations.supabase.base import SupabaseTableRepository
from tilenotes.core.repositories.settings_repository import SettingsRepository

if TYPE_CHECKING:
    from uuid import UUID


class SupabaseSettingsRepository(SupabaseTableRepository, SettingsRepository):
    TABLE_NAME = "user_settings"

    async def get(self, user_id: UUID) -> UserSettings | None:
        resp = await self._run(
            lambda: self._table().select("*").eq("user_id", str(user_id)).limit(1).execute()
        )
        rows = self._rows(resp)
        return self._row_to_settings(rows[0]) if rows else None

    async def create(self, user_settings: UserSettings) -> UserSettings:
        row = self._to_row(user_settings, drop_none=("updated_at",))
        resp = await self._run(lambda: self._table().insert(row).execute())
        rows = self._rows(resp)
        return self._row_to_settings(rows[0]) if rows else user_settings

    async def update_fields(self, user_id: UUID, changes: dict[str, Any]) -> UserSettings | None:
        sanitized = {
            k: self._jsonable(v)
            for k, v in (changes or {}).items()
            if k not in {"user_id", "created_at", "updated_at"}
        }
        if not sanitized:
            return await self.get(user_id)
        resp = await self._run(
            lambda: self._table().update(sanitized).eq("user_id", str(user_id)).execute()
        )
        rows = self._rows(resp)
        return self._row_to_settings(rows[0]) if rows else None

    async def delete(self, user_id: UUID) -> bool:
        resp = await self._run(
            lambda: self._table().delete().eq("user_id", str(user_id)).execute()
        )
        return len(self._rows(resp)) > 0

    @classmethod
    def _row_to_settings(cls, row: dict[str, Any]) -> UserSettings:
        normalized = dict(row)
        # TIME column comes back as HH:MM:SS
        email_time = normalized.get("email_time")
        if isinstance(email_time, str) and email_time.count(":") == 2:
            normalized["email_time"] = email_time.rsplit(":", 1)[0]
        return cls._to_model(UserSettings, normalized)
