from __future__ import annotations

from datetime import date  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from tilenotes.api.v1.schemas.attachment import AttachmentRead
from tilenotes.api.v1.schemas.note import (
    EnrichmentResponse,
    NoteCreate,
    NoteRead,
    NoteReorderRequest,
    NoteReorderResponse,
    NoteUpdate,
)
from tilenotes.api.v1.schemas.task import TaskRead
from tilenotes.background.scheduler import EnrichmentScheduler  # noqa: TCH001
from tilenotes.core.models.note import NoteType  # noqa: TCH001
from tilenotes.core.models.settings import UserSettings  # noqa: TCH001
from tilenotes.core.schemas.auth import AuthUser  # noqa: TCH001
from tilenotes.core.schemas.filters import NoteFilter, NoteSortField, SortOrder
from tilenotes.core.services.attachment_service import AttachmentService  # noqa: TCH001
from tilenotes.core.services.filter_service import filter_notes
from tilenotes.core.services.note_service import NoteService  # noqa: TCH001
from tilenotes.core.sync.notes import NoteSynchronizer  # noqa: TCH001
from tilenotes.core.sync.tasks import TaskSynchronizer  # noqa: TCH001
from tilenotes.dependencies import (
    get_attachment_service,
    get_current_user,
    get_enrichment_scheduler,
    get_note_service,
    get_note_synchronizer,
    get_task_synchronizer,
    get_user_settings,
)

router = APIRouter()


def get_note_filter(
    q: str | None = Query(default=None, description="Search in title, content and tags"),
    tags: list[str] | None = Query(default=None),
    note_type: NoteType | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    pinned_only: bool = False,
    sort_by: NoteSortField | None = None,
    sort_order: SortOrder = SortOrder.DESC,
) -> NoteFilter:
    return NoteFilter(
        query=q,
        tags=tags or [],
        note_type=note_type,
        date_from=date_from,
        date_to=date_to,
        pinned_only=pinned_only,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    note_filter: NoteFilter = Depends(get_note_filter),
    sync: NoteSynchronizer = Depends(get_note_synchronizer),
):
    """Grid contents: a full reload of the owner's notes, then search and filters."""
    notes = await sync.reload()
    return [NoteRead.model_validate(n) for n in filter_notes(notes, note_filter)]


@router.post("/", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    sync: NoteSynchronizer = Depends(get_note_synchronizer),
    user_settings: UserSettings = Depends(get_user_settings),
    scheduler: EnrichmentScheduler = Depends(get_enrichment_scheduler),
):
    note = await sync.create(payload)
    scheduler.schedule(note, auto_enabled=user_settings.auto_ai_processing)
    return NoteRead.model_validate(note)


@router.post("/reorder", response_model=NoteReorderResponse)
async def reorder_notes(
    payload: NoteReorderRequest,
    sync: NoteSynchronizer = Depends(get_note_synchronizer),
):
    """Swap the grid positions of the dragged tile and the tile it was dropped on."""
    dragged, target = await sync.swap_positions(payload.dragged_id, payload.target_id)
    return NoteReorderResponse(
        dragged=NoteRead.model_validate(dragged),
        target=NoteRead.model_validate(target),
    )


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.get_note(note_id, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    sync: NoteSynchronizer = Depends(get_note_synchronizer),
    user_settings: UserSettings = Depends(get_user_settings),
    scheduler: EnrichmentScheduler = Depends(get_enrichment_scheduler),
):
    note = await sync.update(note_id, payload)
    scheduler.schedule(note, auto_enabled=user_settings.auto_ai_processing)
    return NoteRead.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    sync: NoteSynchronizer = Depends(get_note_synchronizer),
    tasks: TaskSynchronizer = Depends(get_task_synchronizer),
    scheduler: EnrichmentScheduler = Depends(get_enrichment_scheduler),
):
    await sync.delete(note_id)
    scheduler.cancel(note_id)
    tasks.forget_note(note_id)
    return None


@router.post("/{note_id}/enrich", response_model=EnrichmentResponse)
async def enrich_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    scheduler: EnrichmentScheduler = Depends(get_enrichment_scheduler),
):
    """Re-run AI enrichment right away, even if the note was enriched before."""
    note = await service.get_note(note_id, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    outcome = await scheduler.run_now(note.id, current_user.id)
    if outcome.note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return EnrichmentResponse(
        note=NoteRead.model_validate(outcome.note),
        tasks=[TaskRead.model_validate(t) for t in outcome.tasks],
    )


@router.post("/{note_id}/attachments", response_model=AttachmentRead, status_code=status.HTTP_201_CREATED)
async def upload_attachment(
    note_id: UUID,
    file: UploadFile = File(...),
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    attachments: AttachmentService = Depends(get_attachment_service),
):
    note = await service.get_note(note_id, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    data = await file.read()
    return await attachments.upload(
        user_id=current_user.id,
        note_id=note.id,
        file_name=file.filename or "upload",
        data=data,
        content_type=file.content_type,
    )


@router.get("/{note_id}/attachments", response_model=list[AttachmentRead])
async def list_attachments(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    attachments: AttachmentService = Depends(get_attachment_service),
):
    note = await service.get_note(note_id, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return await attachments.list_for_note(note.id)
