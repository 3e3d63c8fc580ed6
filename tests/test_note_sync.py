"""Tests for the note synchronizer and its cached grid order."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fakes import OTHER_USER_ID, USER_ID, InMemoryNoteRepository
from tilenotes.api.v1.schemas.note import NoteCreate, NoteUpdate
from tilenotes.core.errors import NoteNotFoundError, PersistenceError
from tilenotes.core.models.note import NoteType
from tilenotes.core.services.note_service import NoteService
from tilenotes.core.sync.notes import NoteSynchronizer


def _sync(repo: InMemoryNoteRepository | None = None, **kwargs) -> NoteSynchronizer:
    repo = repo or InMemoryNoteRepository()
    return NoteSynchronizer(NoteService(repo), USER_ID, **kwargs)


@pytest.mark.asyncio
async def test_blank_title_gets_type_placeholder() -> None:
    sync = _sync()

    text_note = await sync.create(NoteCreate(title="   "))
    voice_note = await sync.create(NoteCreate(note_type=NoteType.VOICE))

    assert text_note.title == "New text note"
    assert voice_note.title == "New voice note"


@pytest.mark.asyncio
async def test_create_fills_defaults() -> None:
    sync = _sync(default_color="#ABCDEF")

    note = await sync.create(NoteCreate(title="Groceries", content="eggs"))

    assert note.note_type is NoteType.TEXT
    assert note.color == "#ABCDEF"
    assert note.position == (0, 0)
    assert note.pinned is False
    assert note.is_archived is False
    assert note.user_id == USER_ID


@pytest.mark.asyncio
async def test_explicit_color_wins_over_default() -> None:
    sync = _sync(default_color="#ABCDEF")

    note = await sync.create(NoteCreate(title="Red", color="#ff0000"))

    assert note.color == "#FF0000"


@pytest.mark.asyncio
async def test_pinned_notes_stay_in_front() -> None:
    sync = _sync()
    pinned = await sync.create(NoteCreate(title="Pinned", pinned=True))
    first = await sync.create(NoteCreate(title="First"))
    second = await sync.create(NoteCreate(title="Second"))
    pinned_later = await sync.create(NoteCreate(title="Pinned later", pinned=True))

    assert [n.id for n in sync.notes] == [pinned_later.id, pinned.id, second.id, first.id]


@pytest.mark.asyncio
async def test_unpinned_create_lands_after_pinned_block() -> None:
    sync = _sync()
    pinned = await sync.create(NoteCreate(title="Pinned", pinned=True))
    fresh = await sync.create(NoteCreate(title="Fresh"))

    assert sync.notes[0].id == pinned.id
    assert sync.notes[1].id == fresh.id


@pytest.mark.asyncio
async def test_toggling_pin_moves_only_that_note() -> None:
    sync = _sync()
    a = await sync.create(NoteCreate(title="A"))
    b = await sync.create(NoteCreate(title="B"))
    c = await sync.create(NoteCreate(title="C"))

    await sync.update(a.id, NoteUpdate(pinned=True))
    assert [n.id for n in sync.notes] == [a.id, c.id, b.id]

    await sync.update(a.id, NoteUpdate(pinned=False))
    assert [n.id for n in sync.notes] == [c.id, b.id, a.id]


@pytest.mark.asyncio
async def test_failed_create_leaves_cache_untouched() -> None:
    repo = InMemoryNoteRepository()
    sync = _sync(repo)
    existing = await sync.create(NoteCreate(title="Existing"))
    repo.failing_methods.add("create")

    with pytest.raises(PersistenceError):
        await sync.create(NoteCreate(title="Rejected"))

    assert [n.id for n in sync.notes] == [existing.id]


@pytest.mark.asyncio
async def test_failed_update_leaves_cache_untouched() -> None:
    repo = InMemoryNoteRepository()
    sync = _sync(repo)
    note = await sync.create(NoteCreate(title="Before"))
    repo.failing_ids.add(note.id)

    with pytest.raises(PersistenceError):
        await sync.update(note.id, NoteUpdate(title="After"))

    assert sync.collection.get(note.id).title == "Before"


@pytest.mark.asyncio
async def test_update_of_foreign_note_is_not_found() -> None:
    repo = InMemoryNoteRepository()
    other = await NoteSynchronizer(NoteService(repo), OTHER_USER_ID).create(NoteCreate(title="Theirs"))
    sync = _sync(repo)

    with pytest.raises(NoteNotFoundError):
        await sync.update(other.id, NoteUpdate(title="Mine now"))


def test_update_payload_rejects_ai_fields() -> None:
    with pytest.raises(ValidationError):
        NoteUpdate.model_validate({"ai_tags": ["injected"]})


@pytest.mark.asyncio
async def test_deleted_note_is_gone_after_reload() -> None:
    repo = InMemoryNoteRepository()
    sync = _sync(repo)
    keep = await sync.create(NoteCreate(title="Keep"))
    drop = await sync.create(NoteCreate(title="Drop"))

    await sync.delete(drop.id)
    assert drop.id not in sync.collection

    fresh = _sync(repo)
    reloaded = await fresh.reload()
    assert [n.id for n in reloaded] == [keep.id]


@pytest.mark.asyncio
async def test_reload_hides_archived_notes() -> None:
    repo = InMemoryNoteRepository()
    sync = _sync(repo)
    archived = await sync.create(NoteCreate(title="Old"))
    await sync.update(archived.id, NoteUpdate(is_archived=True))

    assert await sync.reload() == []
