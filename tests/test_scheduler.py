"""Tests for the settle-delay enrichment scheduler."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from fakes import OTHER_USER_ID, USER_ID
from tilenotes.background.enrichment import EnrichmentOutcome
from tilenotes.background.scheduler import EnrichmentScheduler
from tilenotes.core.models.note import Note

LONG_CONTENT = "Remember to renew the passport before the trip"


class RecordingJob:
    def __init__(self, *, fail: bool = False) -> None:
        self.calls: list[tuple] = []
        self.fail = fail

    async def __call__(self, *, note_id, user_id, force=False) -> EnrichmentOutcome:
        self.calls.append((note_id, user_id, force))
        if self.fail:
            raise RuntimeError("store unavailable")
        return EnrichmentOutcome(note_id=note_id, user_id=user_id)


def _note(content: str = LONG_CONTENT, **kwargs) -> Note:
    return Note(user_id=USER_ID, content=content, **kwargs)


@pytest.mark.asyncio
async def test_job_runs_after_settle_delay() -> None:
    job = RecordingJob()
    completed: list[EnrichmentOutcome] = []
    scheduler = EnrichmentScheduler(job, settle_delay=0.01, min_content_length=10, on_complete=completed.append)
    note = _note()

    assert scheduler.schedule(note)
    assert job.calls == []
    await asyncio.sleep(0.05)

    assert job.calls == [(note.id, USER_ID, False)]
    assert [o.note_id for o in completed] == [note.id]
    assert scheduler.pending == set()


@pytest.mark.asyncio
async def test_burst_of_edits_yields_one_call() -> None:
    job = RecordingJob()
    scheduler = EnrichmentScheduler(job, settle_delay=0.02, min_content_length=10)
    note = _note()

    for _ in range(5):
        scheduler.schedule(note)
    await asyncio.sleep(0.08)

    assert len(job.calls) == 1


@pytest.mark.asyncio
async def test_short_content_is_never_scheduled() -> None:
    job = RecordingJob()
    scheduler = EnrichmentScheduler(job, settle_delay=0.0, min_content_length=10)

    assert not scheduler.schedule(_note("tiny"))
    await asyncio.sleep(0.01)

    assert job.calls == []


@pytest.mark.asyncio
async def test_enriched_note_is_not_scheduled() -> None:
    scheduler = EnrichmentScheduler(RecordingJob(), settle_delay=0.0, min_content_length=10)

    assert not scheduler.schedule(_note(ai_processed_at=datetime.now(UTC)))


@pytest.mark.asyncio
async def test_auto_processing_disabled() -> None:
    job = RecordingJob()
    scheduler = EnrichmentScheduler(job, settle_delay=0.0, min_content_length=10)

    assert not scheduler.schedule(_note(), auto_enabled=False)
    await asyncio.sleep(0.01)

    assert job.calls == []


@pytest.mark.asyncio
async def test_cancel_prevents_run() -> None:
    """Deleting a note cancels its pending enrichment."""
    job = RecordingJob()
    scheduler = EnrichmentScheduler(job, settle_delay=0.02, min_content_length=10)
    note = _note()
    scheduler.schedule(note)

    assert scheduler.cancel(note.id)
    await asyncio.sleep(0.05)

    assert job.calls == []
    assert not scheduler.cancel(note.id)


@pytest.mark.asyncio
async def test_cancel_for_user_leaves_other_users_alone() -> None:
    job = RecordingJob()
    scheduler = EnrichmentScheduler(job, settle_delay=0.02, min_content_length=10)
    mine = _note()
    theirs = Note(user_id=OTHER_USER_ID, content=LONG_CONTENT)
    scheduler.schedule(mine)
    scheduler.schedule(theirs)

    assert scheduler.cancel_for_user(USER_ID) == 1
    await asyncio.sleep(0.05)

    assert [c[0] for c in job.calls] == [theirs.id]


@pytest.mark.asyncio
async def test_run_now_forces_and_skips_delay() -> None:
    job = RecordingJob()
    completed: list[EnrichmentOutcome] = []
    scheduler = EnrichmentScheduler(job, settle_delay=10.0, min_content_length=10, on_complete=completed.append)
    note = _note()
    scheduler.schedule(note)

    outcome = await scheduler.run_now(note.id, USER_ID)

    assert outcome.note_id == note.id
    assert job.calls == [(note.id, USER_ID, True)]
    assert note.id not in scheduler.pending
    assert len(completed) == 1


@pytest.mark.asyncio
async def test_failed_job_is_logged_not_raised() -> None:
    job = RecordingJob(fail=True)
    scheduler = EnrichmentScheduler(job, settle_delay=0.0, min_content_length=10)
    note = _note()
    scheduler.schedule(note)

    await asyncio.sleep(0.02)

    assert len(job.calls) == 1
    assert scheduler.pending == set()


@pytest.mark.asyncio
async def test_shutdown_cancels_everything() -> None:
    job = RecordingJob()
    scheduler = EnrichmentScheduler(job, settle_delay=0.05, min_content_length=10)
    scheduler.schedule(_note())
    scheduler.schedule(_note())

    await scheduler.shutdown()
    await asyncio.sleep(0.08)

    assert job.calls == []
    assert scheduler.pending == set()
