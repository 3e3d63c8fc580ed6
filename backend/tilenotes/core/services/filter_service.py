from __future__ import annotations

from datetime import UTC, datetime, time
from typing import TYPE_CHECKING

from tilenotes.core.schemas.filters import NoteSortField, SortOrder, TaskStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tilenotes.core.models.note import Note
    from tilenotes.core.models.task import Task
    from tilenotes.core.schemas.filters import NoteFilter, TaskFilter


def _matches_query(note: Note, query: str) -> bool:
    needle = query.lower()
    haystacks = [note.title or "", note.content or "", *note.tags, *note.ai_tags]
    return any(needle in h.lower() for h in haystacks)


def _day_start(d) -> datetime:
    return datetime.combine(d, time.min, tzinfo=UTC)


def _day_end(d) -> datetime:
    return datetime.combine(d, time.max, tzinfo=UTC)


def filter_notes(notes: Iterable[Note], note_filter: NoteFilter) -> list[Note]:
    """Apply the grid's search box, tag chips, date range and sort controls."""
    result = list(notes)

    if note_filter.query:
        result = [n for n in result if _matches_query(n, note_filter.query)]

    if note_filter.tags:
        wanted = set(note_filter.tags)
        result = [n for n in result if wanted.intersection(n.all_tags)]

    if note_filter.note_type is not None:
        result = [n for n in result if n.note_type == note_filter.note_type]

    if note_filter.date_from is not None:
        start = _day_start(note_filter.date_from)
        result = [n for n in result if n.created_at >= start]
    if note_filter.date_to is not None:
        end = _day_end(note_filter.date_to)
        result = [n for n in result if n.created_at <= end]

    if note_filter.pinned_only:
        result = [n for n in result if n.pinned]

    if note_filter.sort_by is not None:
        reverse = note_filter.sort_order is SortOrder.DESC
        if note_filter.sort_by is NoteSortField.TITLE:
            result.sort(key=lambda n: (n.title or "").lower(), reverse=reverse)
        elif note_filter.sort_by is NoteSortField.UPDATED:
            result.sort(key=lambda n: n.updated_at or n.created_at, reverse=reverse)
        else:
            result.sort(key=lambda n: n.created_at, reverse=reverse)
    return result


def _task_sort_key(task: Task, now: datetime) -> tuple:
    due = task.due_at
    return (
        0 if task.is_overdue(now) else 1,
        0 if due is not None else 1,
        due.timestamp() if due is not None else 0.0,
        -task.created_at.timestamp(),
    )


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter, *, now: datetime | None = None) -> list[Task]:
    """Filter by status/query and order overdue first, then by due date, then newest."""
    now = now or datetime.now(UTC)
    result = list(tasks)

    if task_filter.status is TaskStatus.PENDING:
        result = [t for t in result if not t.is_completed]
    elif task_filter.status is TaskStatus.COMPLETED:
        result = [t for t in result if t.is_completed]
    elif task_filter.status is TaskStatus.OVERDUE:
        result = [t for t in result if t.is_overdue(now)]

    if task_filter.note_id:
        result = [t for t in result if str(t.note_id) == task_filter.note_id]

    if task_filter.query:
        needle = task_filter.query.lower()
        result = [
            t for t in result
            if needle in t.title.lower() or needle in (t.description or "").lower()
        ]

    return sorted(result, key=lambda t: _task_sort_key(t, now))


def task_stats(tasks: Sequence[Task], *, now: datetime | None = None) -> dict[str, int]:
    now = now or datetime.now(UTC)
    completed = sum(1 for t in tasks if t.is_completed)
    return {
        "total": len(tasks),
        "completed": completed,
        "pending": len(tasks) - completed,
        "overdue": sum(1 for t in tasks if t.is_overdue(now)),
    }
