from __future__ import annotations

from fastapi import APIRouter, Depends

from tilenotes.core.models.note import NOTE_TYPE_COLORS, NoteType
from tilenotes.core.schemas.taxonomy import NoteTaxonomy
from tilenotes.core.services.taxonomy_service import build_note_taxonomy
from tilenotes.core.sync.notes import NoteSynchronizer  # noqa: TCH001
from tilenotes.dependencies import get_note_synchronizer

router = APIRouter()


@router.get("/tags", response_model=NoteTaxonomy)
async def get_tags(
    q: str | None = None,
    sync: NoteSynchronizer = Depends(get_note_synchronizer),
) -> NoteTaxonomy:
    """Tag sidebar: every user and AI tag with the number of notes carrying it."""
    notes = await sync.reload()
    return build_note_taxonomy(notes, query=q)


@router.get("/note-types")
async def list_note_types() -> list[dict[str, str]]:
    """Supported note types with their placeholder titles and tile colors."""
    return [
        {"value": t.value, "placeholder_title": t.placeholder_title, "color": NOTE_TYPE_COLORS[t]}
        for t in NoteType
    ]
