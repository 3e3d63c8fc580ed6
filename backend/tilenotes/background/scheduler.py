from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from tilenotes.background.enrichment import enrich_and_store_note, should_enrich
from tilenotes.config import settings
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from tilenotes.background.enrichment import EnrichmentOutcome
    from tilenotes.core.models.note import Note

    EnrichmentJob = Callable[..., Awaitable[EnrichmentOutcome]]
    OutcomeCallback = Callable[[EnrichmentOutcome], None]

logger = get_logger(__name__)


class EnrichmentScheduler:
    """Runs enrichment a settle delay after the last edit of a note.

    One timer per note: scheduling a note that already has a pending timer
    replaces it, so a burst of edits yields a single enrichment call.
    Deleting a note cancels its timer.
    """

    def __init__(
        self,
        job: EnrichmentJob = enrich_and_store_note,
        *,
        settle_delay: float | None = None,
        min_content_length: int | None = None,
        on_complete: OutcomeCallback | None = None,
    ) -> None:
        self._job = job
        self._settle_delay = settings.enrichment_settle_delay if settle_delay is None else settle_delay
        self._min_content_length = min_content_length
        self._on_complete = on_complete
        self._pending: dict[UUID, asyncio.Task] = {}
        self._owners: dict[UUID, UUID] = {}

    @property
    def pending(self) -> set[UUID]:
        return {note_id for note_id, task in self._pending.items() if not task.done()}

    def schedule(self, note: Note, *, auto_enabled: bool = True) -> bool:
        """Start (or restart) the settle timer for a note. Returns True if scheduled."""
        if not auto_enabled:
            logger.debug("Auto enrichment disabled for user %s", note.user_id)
            return False
        if not should_enrich(note, min_content_length=self._min_content_length):
            return False
        self.cancel(note.id)
        self._owners[note.id] = note.user_id
        self._pending[note.id] = asyncio.create_task(
            self._run(note.id, note.user_id, delay=self._settle_delay, force=False),
            name=f"enrich-{note.id}",
        )
        logger.debug("Scheduled enrichment for note %s in %.1fs", note.id, self._settle_delay)
        return True

    async def run_now(self, note_id: UUID, user_id: UUID) -> EnrichmentOutcome:
        """Explicit re-trigger: no delay, ignores earlier enrichment."""
        self.cancel(note_id)
        outcome = await self._job(note_id=note_id, user_id=user_id, force=True)
        self._notify(outcome)
        return outcome

    def cancel(self, note_id: UUID) -> bool:
        self._owners.pop(note_id, None)
        task = self._pending.pop(note_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Cancelled pending enrichment for note %s", note_id)
        return True

    def cancel_for_user(self, user_id: UUID) -> int:
        """Cancel every pending timer of one owner (account wipe)."""
        note_ids = [note_id for note_id, owner in self._owners.items() if owner == user_id]
        return sum(1 for note_id in note_ids if self.cancel(note_id))

    async def shutdown(self) -> None:
        tasks = [t for t in self._pending.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._pending.clear()
        self._owners.clear()

    async def _run(self, note_id: UUID, user_id: UUID, *, delay: float, force: bool) -> None:
        current = asyncio.current_task()
        try:
            if delay > 0:
                await asyncio.sleep(delay)
            outcome = await self._job(note_id=note_id, user_id=user_id, force=force)
            self._notify(outcome)
        except asyncio.CancelledError:
            raise
        except Exception as err:
            logger.error("Enrichment job failed for note %s: %s", note_id, err)
            logger.error("Error type: %s", type(err).__name__)
        finally:
            if self._pending.get(note_id) is current:
                self._pending.pop(note_id, None)
                self._owners.pop(note_id, None)

    def _notify(self, outcome: EnrichmentOutcome) -> None:
        if self._on_complete is None:
            return
        try:
            self._on_complete(outcome)
        except Exception as err:
            logger.error("Enrichment completion hook failed for note %s: %s", outcome.note_id, err)
