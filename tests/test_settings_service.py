"""Tests for user settings, data export, account wipe and attachments."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fakes import (
    USER_ID,
    InMemoryAttachmentRepository,
    InMemoryNoteRepository,
    InMemorySettingsRepository,
    InMemoryTaskRepository,
)
from tilenotes.api.v1.schemas.note import NoteCreate
from tilenotes.api.v1.schemas.settings import UserSettingsUpdate
from tilenotes.api.v1.schemas.task import TaskCreate
from tilenotes.core.models.attachment import AttachmentType
from tilenotes.core.services.attachment_service import AttachmentService
from tilenotes.core.services.note_service import NoteService
from tilenotes.core.services.settings_service import SettingsService
from tilenotes.core.services.task_service import TaskService


@pytest.fixture
def repos():
    return InMemorySettingsRepository(), InMemoryNoteRepository(), InMemoryTaskRepository()


@pytest.fixture
def service(repos) -> SettingsService:
    settings_repo, note_repo, task_repo = repos
    return SettingsService(settings_repo, NoteService(note_repo), TaskService(task_repo))


@pytest.mark.asyncio
async def test_defaults_are_created_once(service, repos) -> None:
    first = await service.get_or_create(USER_ID)
    second = await service.get_or_create(USER_ID)

    assert first.daily_task_summary is True
    assert first.email_time == "09:00"
    assert first.timezone == "UTC"
    assert first.default_note_color == "#FFFACD"
    assert first.auto_ai_processing is True
    assert second == first
    assert [c[0] for c in repos[0].calls].count("create") == 1


@pytest.mark.asyncio
async def test_partial_update(service) -> None:
    updated = await service.update(USER_ID, UserSettingsUpdate(auto_ai_processing=False, default_note_color="#e6f3ff"))

    assert updated.auto_ai_processing is False
    assert updated.default_note_color == "#E6F3FF"
    assert updated.timezone == "UTC"


def test_update_rejects_bad_email_time() -> None:
    with pytest.raises(ValidationError):
        UserSettingsUpdate(email_time="25:00")


@pytest.mark.asyncio
async def test_export_contains_everything(service, repos) -> None:
    _, note_repo, task_repo = repos
    note = await NoteService(note_repo).create_note(NoteCreate(title="Keep me"), USER_ID)
    await TaskService(task_repo).create_task(TaskCreate(title="Do it", note_id=note.id), USER_ID)
    await service.get_or_create(USER_ID)

    export = await service.export_data(USER_ID)
    payload = export.model_dump(mode="json")

    assert payload["version"] == "1.0"
    assert [n["title"] for n in payload["notes"]] == ["Keep me"]
    assert [t["title"] for t in payload["tasks"]] == ["Do it"]
    assert payload["settings"]["user_id"] == str(USER_ID)
    assert payload["export_date"]


@pytest.mark.asyncio
async def test_delete_all_removes_tasks_then_notes_then_settings(service, repos) -> None:
    settings_repo, note_repo, task_repo = repos
    note = await NoteService(note_repo).create_note(NoteCreate(title="Gone"), USER_ID)
    await TaskService(task_repo).create_task(TaskCreate(title="Gone too", note_id=note.id), USER_ID)
    await service.get_or_create(USER_ID)

    result = await service.delete_all_data(USER_ID)

    assert result.notes_deleted == 1
    assert result.tasks_deleted == 1
    assert result.settings_deleted is True
    assert note_repo.rows == {}
    assert task_repo.rows == {}
    assert settings_repo.rows == {}


@pytest.mark.asyncio
async def test_attachment_upload_and_listing() -> None:
    repo = InMemoryAttachmentRepository()
    service = AttachmentService(repo)
    note_id = USER_ID

    stored = await service.upload(
        user_id=USER_ID,
        note_id=note_id,
        file_name="holiday photo.png",
        data=b"\x89PNG",
        content_type="image/png",
    )

    assert stored.storage_path.startswith(f"{USER_ID}/{note_id}/")
    assert stored.storage_path.endswith("-holiday_photo.png")
    assert stored.file_type is AttachmentType.IMAGE
    assert stored.file_size == 4
    assert stored.public_url.endswith(stored.storage_path)
    assert repo.objects[stored.storage_path] == (b"\x89PNG", "image/png")
    assert [a.id for a in await service.list_for_note(note_id)] == [stored.id]


@pytest.mark.asyncio
async def test_empty_attachment_is_rejected() -> None:
    service = AttachmentService(InMemoryAttachmentRepository())

    with pytest.raises(ValueError):
        await service.upload(user_id=USER_ID, note_id=USER_ID, file_name="x.txt", data=b"", content_type=None)
