from __future__ import annotations

import calendar
from datetime import UTC, date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tilenotes.core.models.note import Note
    from tilenotes.core.models.task import Task


def _note_day(note: Note) -> date:
    created = note.created_at
    if created.tzinfo is not None:
        created = created.astimezone(UTC)
    return created.date()


def notes_for_date(notes: Iterable[Note], day: date) -> list[Note]:
    """Notes created on the given (UTC) day, in their current order."""
    return [n for n in notes if _note_day(n) == day]


def tasks_for_date(tasks: Iterable[Task], day: date) -> list[Task]:
    result = []
    for task in tasks:
        due = task.due_at
        if due is not None and due.astimezone(UTC).date() == day:
            result.append(task)
    return result


def month_calendar(
    notes: Iterable[Note],
    tasks: Iterable[Task],
    year: int,
    month: int,
) -> dict[date, tuple[list[Note], list[Task]]]:
    """Every day of the month mapped to the notes created and tasks due that day."""
    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    notes = list(notes)
    tasks = list(tasks)
    _, days_in_month = calendar.monthrange(year, month)

    days: dict[date, tuple[list[Note], list[Task]]] = {
        date(year, month, d): ([], []) for d in range(1, days_in_month + 1)
    }
    for note in notes:
        bucket = days.get(_note_day(note))
        if bucket is not None:
            bucket[0].append(note)
    for task in tasks:
        due = task.due_at
        if due is None:
            continue
        bucket = days.get(due.astimezone(UTC).date())
        if bucket is not None:
            bucket[1].append(task)
    return days
