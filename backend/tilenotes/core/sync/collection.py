"""In-memory mirrors of a user's note and task tables.

The collections never talk to the network; synchronizers mutate them only
after the remote store has acknowledged a write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from tilenotes.core.models.note import Note
    from tilenotes.core.models.task import Task

RecordT = TypeVar("RecordT")


def note_sort_key(note: Note) -> tuple[bool, float]:
    """Pinned first, then newest-created first."""
    return (not note.pinned, -note.created_at.timestamp())


def sort_notes(notes: Iterable[Note]) -> list[Note]:
    return sorted(notes, key=note_sort_key)


class RecordCollection(Generic[RecordT]):
    """Ordered records keyed by id, newest first."""

    def __init__(self, records: Iterable[RecordT] = ()) -> None:
        self._records: list[RecordT] = self._sorted(records)
        self.loaded = False

    def _sorted(self, records: Iterable[RecordT]) -> list[RecordT]:
        return sorted(records, key=lambda r: -r.created_at.timestamp())

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)

    @property
    def items(self) -> list[RecordT]:
        return list(self._records)

    def get(self, record_id: UUID) -> RecordT | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def reset(self, records: Iterable[RecordT]) -> None:
        self._records = self._sorted(records)
        self.loaded = True

    def insert(self, record: RecordT) -> None:
        self._records.insert(0, record)

    def replace(self, record: RecordT) -> None:
        """Swap in the stored version of a record and restore the ordering."""
        others = [r for r in self._records if r.id != record.id]
        self._records = self._sorted([*others, record])

    def remove(self, record_id: UUID) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        return len(self._records) != before


class NoteCollection(RecordCollection["Note"]):
    """Notes in grid order: pinned before unpinned, newest first in each group."""

    def _sorted(self, records):
        return sort_notes(records)

    def insert(self, record: Note) -> None:
        # A fresh note is the newest of its group
        if record.pinned:
            self._records.insert(0, record)
            return
        index = sum(1 for n in self._records if n.pinned)
        self._records.insert(index, record)


class TaskCollection(RecordCollection["Task"]):
    pass
