"""Tests for note/task filtering, tag counts and the calendar views."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from fakes import USER_ID
from tilenotes.core.models.note import Note, NoteType
from tilenotes.core.models.task import Task
from tilenotes.core.schemas.filters import NoteFilter, NoteSortField, SortOrder, TaskFilter, TaskStatus
from tilenotes.core.services.calendar_service import month_calendar, notes_for_date, tasks_for_date
from tilenotes.core.services.filter_service import filter_notes, filter_tasks, task_stats
from tilenotes.core.services.taxonomy_service import build_note_taxonomy, tag_counts, tag_vocabulary
from tilenotes.core.sync.collection import sort_notes

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


def _note(title: str, day: int, **kwargs) -> Note:
    return Note(
        user_id=USER_ID,
        title=title,
        created_at=datetime(2024, 5, day, 10, 0, tzinfo=UTC),
        **kwargs,
    )


def _task(title: str, day: int, **kwargs) -> Task:
    return Task(
        user_id=USER_ID,
        title=title,
        created_at=datetime(2024, 5, day, 8, 0, tzinfo=UTC),
        **kwargs,
    )


@pytest.fixture
def notes() -> list[Note]:
    return sort_notes([
        _note("Groceries", 1, content="milk and eggs", tags=["home"]),
        _note("Sprint plan", 10, content="ship the beta", tags=["work"], ai_tags=["planning"], pinned=True),
        _note("Trip photo", 12, note_type=NoteType.IMAGE, ai_tags=["travel", "home"]),
        _note("Standup", 14, content="Blocked on review", tags=["work"]),
    ])


def test_query_matches_title_content_and_tags(notes) -> None:
    assert [n.title for n in filter_notes(notes, NoteFilter(query="EGGS"))] == ["Groceries"]
    assert [n.title for n in filter_notes(notes, NoteFilter(query="planning"))] == ["Sprint plan"]
    assert [n.title for n in filter_notes(notes, NoteFilter(query="trip"))] == ["Trip photo"]


def test_tag_filter_matches_any_tag(notes) -> None:
    result = filter_notes(notes, NoteFilter(tags=["#Home"]))

    assert {n.title for n in result} == {"Groceries", "Trip photo"}


def test_filter_keeps_pinned_order_without_sort(notes) -> None:
    result = filter_notes(notes, NoteFilter(tags=["work"]))

    assert [n.title for n in result] == ["Sprint plan", "Standup"]


def test_date_range_is_inclusive(notes) -> None:
    result = filter_notes(notes, NoteFilter(date_from=date(2024, 5, 10), date_to=date(2024, 5, 12)))

    assert {n.title for n in result} == {"Sprint plan", "Trip photo"}


def test_type_pinned_and_sort(notes) -> None:
    assert [n.title for n in filter_notes(notes, NoteFilter(note_type=NoteType.IMAGE))] == ["Trip photo"]
    assert [n.title for n in filter_notes(notes, NoteFilter(pinned_only=True))] == ["Sprint plan"]

    by_title = filter_notes(notes, NoteFilter(sort_by=NoteSortField.TITLE, sort_order=SortOrder.ASC))
    assert [n.title for n in by_title] == ["Groceries", "Sprint plan", "Standup", "Trip photo"]


def test_filter_returns_new_list(notes) -> None:
    result = filter_notes(notes, NoteFilter())

    assert result == notes
    assert result is not notes


def test_tasks_order_overdue_then_due_then_newest() -> None:
    tasks = [
        _task("undated old", 1),
        _task("undated new", 9),
        _task("due later", 2, due_date="2024-05-30"),
        _task("overdue", 3, due_date="2024-05-02"),
        _task("due soon", 4, due_date="2024-05-20"),
    ]

    ordered = filter_tasks(tasks, TaskFilter(), now=NOW)

    assert [t.title for t in ordered] == ["overdue", "due soon", "due later", "undated new", "undated old"]


def test_task_status_filters() -> None:
    done = _task("done", 1, is_completed=True, due_date="2024-05-01")
    late = _task("late", 2, due_date="2024-05-01")
    open_task = _task("open", 3, due_date="not a date")
    tasks = [done, late, open_task]

    assert filter_tasks(tasks, TaskFilter(status=TaskStatus.OVERDUE), now=NOW) == [late]
    assert filter_tasks(tasks, TaskFilter(status=TaskStatus.COMPLETED), now=NOW) == [done]
    assert {t.title for t in filter_tasks(tasks, TaskFilter(status=TaskStatus.PENDING), now=NOW)} == {"late", "open"}
    assert task_stats(tasks, now=NOW) == {"total": 3, "completed": 1, "pending": 2, "overdue": 1}


def test_tag_counts_include_ai_tags(notes) -> None:
    counts = tag_counts(notes)

    assert [(c.tag, c.count) for c in counts] == [
        ("home", 2),
        ("work", 2),
        ("planning", 1),
        ("travel", 1),
    ]
    assert {c.tag for c in counts if c.ai_generated} == {"planning", "travel"}
    assert tag_vocabulary(notes) == ["home", "planning", "travel", "work"]
    assert build_note_taxonomy(notes, query="tra").tag_vocab == ["travel"]


def test_calendar_day_and_month(notes) -> None:
    tasks = [_task("pay rent", 1, due_date="2024-05-14T09:00:00"), _task("someday", 2)]

    assert [n.title for n in notes_for_date(notes, date(2024, 5, 14))] == ["Standup"]
    assert [t.title for t in tasks_for_date(tasks, date(2024, 5, 14))] == ["pay rent"]

    month = month_calendar(notes, tasks, 2024, 5)
    assert len(month) == 31
    day_notes, day_tasks = month[date(2024, 5, 14)]
    assert [n.title for n in day_notes] == ["Standup"]
    assert [t.title for t in day_tasks] == ["pay rent"]
    assert month[date(2024, 5, 2)] == ([], [])


def test_calendar_rejects_bad_month() -> None:
    with pytest.raises(ValueError):
        month_calendar([], [], 2024, 13)
