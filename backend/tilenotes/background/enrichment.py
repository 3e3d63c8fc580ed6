from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from tilenotes.config import settings
from tilenotes.core.repositories.implementations.supabase.note_repository import SupabaseNoteRepository
from tilenotes.core.repositories.implementations.supabase.task_repository import SupabaseTaskRepository
from tilenotes.core.services.enrichment_service import analyze_note
from tilenotes.core.services.note_service import NoteService
from tilenotes.core.services.task_service import TaskService
from tilenotes.db.base import get_supabase_admin_client
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from tilenotes.core.models.note import Note
    from tilenotes.core.models.task import Task
    from tilenotes.core.schemas.enrichment import NoteAnalysis

logger = get_logger(__name__)


@dataclass
class EnrichmentOutcome:
    note_id: UUID
    user_id: UUID
    note: Note | None = None
    tasks: list[Task] = field(default_factory=list)
    analysis: NoteAnalysis | None = None
    skipped: bool = False


def should_enrich(note: Note, *, min_content_length: int | None = None) -> bool:
    """Whether a freshly created or edited note qualifies for automatic enrichment."""
    threshold = settings.enrichment_min_content_length if min_content_length is None else min_content_length
    if note.is_enriched:
        return False
    return len((note.content or "").strip()) > threshold


def _admin_services() -> tuple[NoteService, TaskService]:
    client = get_supabase_admin_client()
    return NoteService(SupabaseNoteRepository(client)), TaskService(SupabaseTaskRepository(client))


async def enrich_and_store_note(
    *,
    note_id: UUID,
    user_id: UUID,
    force: bool = False,
    note_service: NoteService | None = None,
    task_service: TaskService | None = None,
) -> EnrichmentOutcome:
    """Analyze a note and persist AI tags, summary and extracted tasks.

    Runs with the admin client unless services are passed in. A note that was
    deleted before or during the job is skipped; `PersistenceError` from the
    writes propagates to the caller.
    """
    if note_service is None or task_service is None:
        admin_notes, admin_tasks = _admin_services()
        note_service = note_service or admin_notes
        task_service = task_service or admin_tasks

    outcome = EnrichmentOutcome(note_id=note_id, user_id=user_id)
    logger.info("Starting enrichment job for note %s (user: %s)", note_id, user_id)

    note = await note_service.get_note(note_id, user_id)
    if note is None:
        logger.info("Note %s no longer exists, skipping enrichment", note_id)
        outcome.skipped = True
        return outcome
    if note.is_enriched and not force:
        logger.info("Note %s already enriched at %s", note_id, note.ai_processed_at)
        outcome.note = note
        outcome.skipped = True
        return outcome

    analysis = await analyze_note(note)
    outcome.analysis = analysis
    logger.debug("Enrichment result for note %s: %s", note_id, analysis)

    updated = await note_service.apply_enrichment(
        note_id,
        ai_tags=analysis.tags,
        ai_summary=analysis.summary,
        processed_at=datetime.now(UTC),
    )
    if updated is None:
        logger.info("Note %s was deleted during enrichment, dropping results", note_id)
        outcome.skipped = True
        return outcome
    outcome.note = updated

    if analysis.tasks:
        created = await task_service.create_extracted_tasks(
            user_id=user_id,
            note_id=note_id,
            titles=analysis.tasks,
        )
        outcome.tasks = list(created)

    logger.info(
        "Enriched note %s: %d tags, %d tasks",
        note_id,
        len(analysis.tags),
        len(outcome.tasks),
    )
    return outcome
