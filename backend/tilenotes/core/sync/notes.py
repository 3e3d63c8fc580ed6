from __future__ import annotations

from typing import TYPE_CHECKING

from tilenotes.core.errors import NoteNotFoundError, PersistenceError
from tilenotes.core.sync.collection import NoteCollection
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from tilenotes.api.v1.schemas.note import NoteCreate, NoteUpdate
    from tilenotes.core.models.note import Note
    from tilenotes.core.services.note_service import NoteService

logger = get_logger(__name__)


class NoteSynchronizer:
    """Keeps a user's cached note collection in step with the notes table.

    Every mutation goes to the remote store first. The cache only changes once
    the store has returned the committed row, so a rejected write leaves the
    cache exactly as it was and surfaces as `PersistenceError`.
    """

    def __init__(
        self,
        service: NoteService,
        user_id: UUID,
        collection: NoteCollection | None = None,
        *,
        default_color: str | None = None,
    ) -> None:
        self._service = service
        self._user_id = user_id
        self.collection = collection if collection is not None else NoteCollection()
        self._default_color = default_color

    @property
    def notes(self) -> list[Note]:
        return self.collection.items

    async def reload(self) -> list[Note]:
        """Replace the cache with a fresh read of the owner's notes."""
        notes = await self._service.list_notes(self._user_id)
        self.collection.reset(notes)
        logger.debug("Reloaded %d notes", len(notes), extra={"user_id": str(self._user_id)})
        return self.collection.items

    async def create(self, create_dto: NoteCreate) -> Note:
        note = await self._service.create_note(
            create_dto, self._user_id, default_color=self._default_color
        )
        self.collection.insert(note)
        logger.info("Created note %s", note.id, extra={"user_id": str(self._user_id)})
        return note

    async def update(self, note_id: UUID, update_dto: NoteUpdate) -> Note:
        note = await self._service.update_note(note_id, update_dto, self._user_id)
        if note is None:
            raise NoteNotFoundError(f"Note {note_id} not found")
        self.collection.replace(note)
        return note

    async def delete(self, note_id: UUID) -> None:
        deleted = await self._service.delete_note(note_id, self._user_id)
        if not deleted:
            raise NoteNotFoundError(f"Note {note_id} not found")
        self.collection.remove(note_id)
        logger.info("Deleted note %s", note_id, extra={"user_id": str(self._user_id)})

    async def swap_positions(self, dragged_id: UUID, target_id: UUID) -> tuple[Note, Note]:
        """Exchange the grid positions of two tiles.

        Two independent remote writes are needed. If the second one fails the
        first is rolled back with a compensating write before the error is
        raised; the cache is only touched once both writes have landed.
        """
        dragged = await self._service.get_note(dragged_id, self._user_id)
        target = await self._service.get_note(target_id, self._user_id)
        if dragged is None:
            raise NoteNotFoundError(f"Note {dragged_id} not found")
        if target is None:
            raise NoteNotFoundError(f"Note {target_id} not found")
        if dragged.id == target.id:
            return dragged, target

        moved = await self._service.set_position(dragged.id, target.position)
        if moved is None:
            raise NoteNotFoundError(f"Note {dragged_id} not found")
        try:
            displaced = await self._service.set_position(target.id, dragged.position)
            if displaced is None:
                raise NoteNotFoundError(f"Note {target_id} not found")
        except PersistenceError:
            logger.warning(
                "Position swap failed halfway; restoring note %s",
                dragged.id,
                extra={"user_id": str(self._user_id)},
            )
            await self._service.set_position(dragged.id, dragged.position)
            raise

        self.collection.replace(moved)
        self.collection.replace(displaced)
        return moved, displaced
