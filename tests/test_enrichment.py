"""Tests for the enrichment job and its completion-service fallback."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from fakes import USER_ID, FailingCompletionClient, InMemoryNoteRepository, InMemoryTaskRepository
from tilenotes.api.v1.schemas.note import NoteCreate
from tilenotes.background.enrichment import enrich_and_store_note, should_enrich
from tilenotes.core.models.note import Note, NoteType
from tilenotes.core.models.task import TaskPriority
from tilenotes.core.schemas.enrichment import NoteAnalysis, Sentiment
from tilenotes.core.services import enrichment_service
from tilenotes.core.services.note_service import NoteService
from tilenotes.core.services.task_service import TaskService

BOLD_NOTE = "Plan the launch carefully. **Email the press list** and **book the venue** soon."


class StubCompletionClient:
    """Completion client that returns a fixed structured analysis."""

    def __init__(self, analysis: NoteAnalysis, caption: str = "") -> None:
        self.parse_calls: list[dict] = []
        analysis_result = SimpleNamespace(output_parsed=analysis, refusal=None)
        caption_result = SimpleNamespace(output_text=caption)
        outer = self

        class _Responses:
            async def parse(self, **kwargs):
                outer.parse_calls.append(kwargs)
                return analysis_result

            async def create(self, **kwargs):
                return caption_result

        self.responses = _Responses()


@pytest.fixture
def services():
    return NoteService(InMemoryNoteRepository()), TaskService(InMemoryTaskRepository())


@pytest.fixture
def offline(monkeypatch):
    monkeypatch.setattr(enrichment_service, "get_openai_client", lambda: FailingCompletionClient())


def test_should_enrich_respects_threshold() -> None:
    assert not should_enrich(Note(user_id=USER_ID, content="too short"), min_content_length=10)
    assert not should_enrich(Note(user_id=USER_ID, content="  0123456789  "), min_content_length=10)
    assert should_enrich(Note(user_id=USER_ID, content="long enough content"), min_content_length=10)


def test_should_enrich_skips_enriched_notes() -> None:
    note = Note(user_id=USER_ID, content="long enough content")
    enriched = note.model_copy(update={"ai_processed_at": note.created_at})

    assert not should_enrich(enriched, min_content_length=10)


@pytest.mark.asyncio
async def test_fallback_extracts_bold_tasks(services, offline) -> None:
    """With the completion service down, bold phrases still become tasks."""
    notes, tasks = services
    note = await notes.create_note(NoteCreate(title="Launch", content=BOLD_NOTE), USER_ID)

    outcome = await enrich_and_store_note(
        note_id=note.id, user_id=USER_ID, note_service=notes, task_service=tasks
    )

    assert not outcome.skipped
    assert outcome.analysis.sentiment is Sentiment.NEUTRAL
    assert [t.title for t in outcome.tasks] == ["Email the press list", "book the venue"]
    for task in outcome.tasks:
        assert task.note_id == note.id
        assert task.is_completed is False
        assert task.priority is TaskPriority.MEDIUM

    stored = await notes.get_note(note.id, USER_ID)
    assert stored.ai_processed_at is not None
    assert stored.ai_tags
    assert len(stored.ai_tags) <= 5


@pytest.mark.asyncio
async def test_title_is_not_analyzed(services, offline) -> None:
    notes, tasks = services
    body = "A plain body without any action items, long enough to earn a fallback summary. " * 2
    note = await notes.create_note(NoteCreate(title="**Call the plumber** today", content=body), USER_ID)

    outcome = await enrich_and_store_note(
        note_id=note.id, user_id=USER_ID, note_service=notes, task_service=tasks
    )

    assert outcome.tasks == []
    assert outcome.note.ai_summary == body.strip()[:100].rstrip() + "..."
    assert "plumber" not in outcome.note.ai_summary


@pytest.mark.asyncio
async def test_enriched_note_is_not_enriched_again(services, offline) -> None:
    notes, tasks = services
    note = await notes.create_note(NoteCreate(content=BOLD_NOTE), USER_ID)
    await enrich_and_store_note(note_id=note.id, user_id=USER_ID, note_service=notes, task_service=tasks)

    again = await enrich_and_store_note(
        note_id=note.id, user_id=USER_ID, note_service=notes, task_service=tasks
    )

    assert again.skipped
    assert again.tasks == []
    assert len(await tasks.list_tasks(USER_ID)) == 2


@pytest.mark.asyncio
async def test_forced_run_reenriches(services, offline) -> None:
    notes, tasks = services
    note = await notes.create_note(NoteCreate(content=BOLD_NOTE), USER_ID)
    first = await enrich_and_store_note(note_id=note.id, user_id=USER_ID, note_service=notes, task_service=tasks)

    forced = await enrich_and_store_note(
        note_id=note.id, user_id=USER_ID, force=True, note_service=notes, task_service=tasks
    )

    assert not forced.skipped
    assert forced.note.ai_processed_at >= first.note.ai_processed_at


@pytest.mark.asyncio
async def test_missing_note_is_skipped(services, offline) -> None:
    notes, tasks = services
    note = await notes.create_note(NoteCreate(content=BOLD_NOTE), USER_ID)
    await notes.delete_note(note.id, USER_ID)

    outcome = await enrich_and_store_note(
        note_id=note.id, user_id=USER_ID, note_service=notes, task_service=tasks
    )

    assert outcome.skipped
    assert outcome.note is None


@pytest.mark.asyncio
async def test_completion_result_is_cleaned(monkeypatch) -> None:
    analysis = NoteAnalysis(
        tags=["#Work", "planning", "work", "q3", "budget", "team", "extra"],
        summary="too short",
        tasks=["Send report", "Send report", "  "],
        sentiment=Sentiment.POSITIVE,
    )
    client = StubCompletionClient(analysis)
    monkeypatch.setattr(enrichment_service, "get_openai_client", lambda: client)

    result = await enrichment_service.analyze_note_content(content="Quarterly planning", note_type=NoteType.TEXT)

    assert result.tags == ["work", "planning", "q3", "budget", "team"]
    assert result.summary is None
    assert result.tasks == ["Send report"]
    assert result.sentiment is Sentiment.POSITIVE
    assert len(client.parse_calls) == 1


@pytest.mark.asyncio
async def test_image_caption_becomes_summary(monkeypatch) -> None:
    analysis = NoteAnalysis(tags=["beach"], summary=None, tasks=[], sentiment=Sentiment.POSITIVE)
    caption = "A sandy beach at sunset with two surfboards."
    monkeypatch.setattr(enrichment_service, "get_openai_client", lambda: StubCompletionClient(analysis, caption))
    note = Note(user_id=USER_ID, note_type=NoteType.IMAGE, content="data:image/png;base64,AAAA")

    result = await enrichment_service.analyze_note(note)

    assert result.summary == caption
    assert result.tags == ["beach"]


@pytest.mark.asyncio
async def test_transcription_falls_back(offline) -> None:
    text = await enrichment_service.transcribe_audio(b"\x00\x01", "memo.webm")

    assert text == enrichment_service.TRANSCRIPTION_UNAVAILABLE
