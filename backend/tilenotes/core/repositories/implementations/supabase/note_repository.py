from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tilenotes.core.models.note import Note
from tilenotes.core.repositories.implementations.supabase.base import SupabaseTableRepository
from tilenotes.core.repositories.note_repository import NoteRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseNoteRepository(SupabaseTableRepository, NoteRepository):
    """Supabase implementation of the NoteRepository.

    Uses Supabase's PostgREST client against the `notes` table. Row-level
    security on the table already limits every statement to `auth.uid()`;
    the explicit `user_id` filters keep the admin client equally scoped.
    """

    TABLE_NAME = "notes"
    IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})

    async def create(self, note: Note) -> Note:
        row = self._to_row(note, drop_none=("updated_at", "ai_processed_at"))
        resp = await self._run(lambda: self._table().insert(row).execute())
        rows = self._rows(resp)
        return self._row_to_note(rows[0]) if rows else note

    async def get(self, note_id: UUID) -> Note | None:
        resp = await self._run(
            lambda: self._table()
            .select("*")
            .eq("id", str(note_id))
            .limit(1)
            .execute()
        )
        rows = self._rows(resp)
        if not rows:
            return None
        return self._row_to_note(rows[0])

    async def list(
        self,
        *,
        user_id: UUID,
        limit: int = 500,
        include_archived: bool = False,
    ) -> Sequence[Note]:
        def _query():
            q = self._table().select("*").eq("user_id", str(user_id))
            if not include_archived:
                q = q.eq("is_archived", False)
            return (
                q
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )

        resp = await self._run(_query)
        return [self._row_to_note(r) for r in self._rows(resp)]

    async def update_fields(self, note_id: UUID, changes: dict[str, Any]) -> Note | None:
        sanitized = {
            k: self._jsonable(v)
            for k, v in (changes or {}).items()
            if k not in self.IMMUTABLE_FIELDS
        }
        if not sanitized:
            return await self.get(note_id)

        resp = await self._run(
            lambda: self._table()
            .update(sanitized)
            .eq("id", str(note_id))
            .execute()
        )
        rows = self._rows(resp)
        if not rows:
            return None
        return self._row_to_note(rows[0])

    async def delete(self, note_id: UUID) -> bool:
        resp = await self._run(
            lambda: self._table()
            .delete()
            .eq("id", str(note_id))
            .execute()
        )
        return len(self._rows(resp)) > 0

    async def delete_for_user(self, user_id: UUID) -> int:
        resp = await self._run(
            lambda: self._table()
            .delete()
            .eq("user_id", str(user_id))
            .execute()
        )
        return len(self._rows(resp))

    @classmethod
    def _row_to_note(cls, row: dict[str, Any]) -> Note:
        normalized = dict(row)
        # Nullable array columns come back as None
        for key in ("tags", "ai_tags"):
            if normalized.get(key) is None:
                normalized[key] = []
        if normalized.get("content") is None:
            normalized["content"] = ""
        return cls._to_model(Note, normalized)
