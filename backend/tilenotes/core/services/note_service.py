from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from tilenotes.config import settings
from tilenotes.core.models.note import AI_FIELDS, Note, NoteType
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tilenotes.api.v1.schemas.note import NoteCreate, NoteUpdate
    from tilenotes.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)

USER_EDITABLE_FIELDS = frozenset({
    "title",
    "content",
    "note_type",
    "tags",
    "pinned",
    "color",
    "position_x",
    "position_y",
    "is_archived",
})


def _coerce_uuid(value: str | UUID) -> UUID | None:
    try:
        return UUID(str(value))
    except ValueError:
        return None


class NoteService:
    """Note CRUD scoped to a single owner.

    This is the only place user input becomes note rows: defaults are filled
    in on create and the AI columns are never accepted from an update payload.
    """

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo

    async def create_note(
        self,
        create_dto: NoteCreate,
        user_id: UUID,
        *,
        default_color: str | None = None,
    ) -> Note:
        note_type = create_dto.note_type or NoteType.TEXT
        title = (create_dto.title or "").strip() or note_type.placeholder_title

        note = Note(
            id=uuid4(),
            user_id=user_id,
            title=title,
            content=create_dto.content or "",
            note_type=note_type,
            tags=create_dto.tags or [],
            pinned=bool(create_dto.pinned),
            color=create_dto.color or default_color or settings.default_note_color,
            position_x=create_dto.position_x or 0,
            position_y=create_dto.position_y or 0,
            is_archived=False,
        )
        return await self._repo.create(note)

    async def get_note(self, note_id: str | UUID, user_id: UUID) -> Note | None:
        """Return note if it exists and belongs to the user; otherwise None."""
        note_uuid = _coerce_uuid(note_id)
        if note_uuid is None:
            return None
        note = await self._repo.get(note_uuid)
        if note and note.user_id == user_id:
            return note
        return None

    async def list_notes(
        self,
        user_id: UUID,
        *,
        limit: int | None = None,
        include_archived: bool = False,
    ) -> Sequence[Note]:
        return await self._repo.list(
            user_id=user_id,
            limit=limit or settings.note_list_limit,
            include_archived=include_archived,
        )

    async def update_note(self, note_id: str | UUID, update_dto: NoteUpdate, user_id: UUID) -> Note | None:
        """Apply a user edit. Returns None when the note is missing or not owned."""
        existing = await self.get_note(note_id, user_id)
        if not existing:
            return None

        changes = self._user_changes(update_dto.model_dump(exclude_unset=True), existing)
        if not changes:
            return existing
        return await self._repo.update_fields(existing.id, changes)

    async def set_position(self, note_id: UUID, position: tuple[int, int]) -> Note | None:
        return await self._repo.update_fields(
            note_id, {"position_x": position[0], "position_y": position[1]}
        )

    async def delete_note(self, note_id: str | UUID, user_id: UUID) -> bool:
        note = await self.get_note(note_id, user_id)
        if not note:
            return False
        return await self._repo.delete(note.id)

    async def delete_all(self, user_id: UUID) -> int:
        return await self._repo.delete_for_user(user_id)

    async def apply_enrichment(
        self,
        note_id: UUID,
        *,
        ai_tags: list[str],
        ai_summary: str | None,
        processed_at: datetime | None = None,
    ) -> Note | None:
        """Write the enrichment columns. Returns None if the note is gone."""
        return await self._repo.update_fields(
            note_id,
            {
                "ai_tags": ai_tags,
                "ai_summary": ai_summary,
                "ai_processed_at": processed_at or datetime.now(UTC),
            },
        )

    @staticmethod
    def _user_changes(raw_changes: dict, existing: Note) -> dict:
        changes: dict = {}
        for key, value in raw_changes.items():
            if key not in USER_EDITABLE_FIELDS or key in AI_FIELDS:
                continue
            if key == "title":
                value = (value or "").strip() or None
            if value is None and key != "title":
                # Explicit nulls only make sense for the title
                continue
            changes[key] = value

        if "title" in changes and changes["title"] is None:
            note_type = changes.get("note_type") or existing.note_type
            changes["title"] = NoteType(note_type).placeholder_title
        return changes
