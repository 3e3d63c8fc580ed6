from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tilenotes.core.models.note import Note


class NoteRepository(ABC):
    """Abstract repository interface for notes.

    Implementations perform network I/O and raise `PersistenceError` when the
    remote store rejects an operation.
    """

    @abstractmethod
    async def create(self, note: Note) -> Note:  # pragma: no cover - interface only
        """Persist a new note and return the stored row."""

    @abstractmethod
    async def get(self, note_id: UUID) -> Note | None:  # pragma: no cover
        """Fetch a note by id or return None if not found."""

    @abstractmethod
    async def list(
        self,
        *,
        user_id: UUID,
        limit: int = 500,
        include_archived: bool = False,
    ) -> Sequence[Note]:  # pragma: no cover
        """Return the owner's notes, newest first."""

    @abstractmethod
    async def update_fields(self, note_id: UUID, changes: dict[str, Any]) -> Note | None:  # pragma: no cover
        """Partially update a note and return the stored row, or None if missing."""

    @abstractmethod
    async def delete(self, note_id: UUID) -> bool:  # pragma: no cover
        """Delete a note by id. Return True if a row was removed."""

    @abstractmethod
    async def delete_for_user(self, user_id: UUID) -> int:  # pragma: no cover
        """Delete every note the user owns and return the number removed."""
