"""Tests for swapping tile positions by drag and drop."""

from __future__ import annotations

import pytest

from fakes import USER_ID, InMemoryNoteRepository
from tilenotes.api.v1.schemas.note import NoteCreate
from tilenotes.core.errors import NoteNotFoundError, PersistenceError
from tilenotes.core.services.note_service import NoteService
from tilenotes.core.sync.notes import NoteSynchronizer


async def _two_notes(repo: InMemoryNoteRepository):
    sync = NoteSynchronizer(NoteService(repo), USER_ID)
    a = await sync.create(NoteCreate(title="A", position_x=0, position_y=0))
    b = await sync.create(NoteCreate(title="B", position_x=3, position_y=2))
    return sync, a, b


@pytest.mark.asyncio
async def test_swap_exchanges_positions() -> None:
    repo = InMemoryNoteRepository()
    sync, a, b = await _two_notes(repo)

    moved, displaced = await sync.swap_positions(a.id, b.id)

    assert moved.position == (3, 2)
    assert displaced.position == (0, 0)
    assert repo.rows[a.id].position == (3, 2)
    assert repo.rows[b.id].position == (0, 0)
    assert sync.collection.get(a.id).position == (3, 2)


@pytest.mark.asyncio
async def test_swap_with_itself_writes_nothing() -> None:
    repo = InMemoryNoteRepository()
    sync, a, _ = await _two_notes(repo)
    repo.calls.clear()

    await sync.swap_positions(a.id, a.id)

    assert not [c for c in repo.calls if c[0] == "update_fields"]


@pytest.mark.asyncio
async def test_failed_second_write_restores_first() -> None:
    """When the target write fails the dragged note is put back where it was."""
    repo = InMemoryNoteRepository()
    sync, a, b = await _two_notes(repo)
    repo.failing_ids.add(b.id)

    with pytest.raises(PersistenceError):
        await sync.swap_positions(a.id, b.id)

    assert repo.rows[a.id].position == (0, 0)
    assert repo.rows[b.id].position == (3, 2)
    assert sync.collection.get(a.id).position == (0, 0)
    assert sync.collection.get(b.id).position == (3, 2)


@pytest.mark.asyncio
async def test_failed_first_write_changes_nothing() -> None:
    repo = InMemoryNoteRepository()
    sync, a, b = await _two_notes(repo)
    repo.failing_ids.add(a.id)

    with pytest.raises(PersistenceError):
        await sync.swap_positions(a.id, b.id)

    assert repo.rows[b.id].position == (3, 2)
    assert sync.collection.get(a.id).position == (0, 0)


@pytest.mark.asyncio
async def test_swap_with_missing_note() -> None:
    repo = InMemoryNoteRepository()
    sync, a, b = await _two_notes(repo)
    await sync.delete(b.id)

    with pytest.raises(NoteNotFoundError):
        await sync.swap_positions(a.id, b.id)
