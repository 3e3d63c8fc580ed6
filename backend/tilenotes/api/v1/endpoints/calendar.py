from __future__ import annotations

from datetime import date  # noqa: TCH003

from fastapi import APIRouter, Depends, HTTPException, Path

from tilenotes.api.v1.schemas.calendar import CalendarDay, CalendarMonth
from tilenotes.api.v1.schemas.note import NoteRead
from tilenotes.api.v1.schemas.task import TaskRead
from tilenotes.core.services.calendar_service import month_calendar, notes_for_date, tasks_for_date
from tilenotes.core.sync.notes import NoteSynchronizer  # noqa: TCH001
from tilenotes.core.sync.tasks import TaskSynchronizer  # noqa: TCH001
from tilenotes.dependencies import get_note_synchronizer, get_task_synchronizer

router = APIRouter()


@router.get("/day/{day}", response_model=CalendarDay)
async def get_day(
    day: date,
    notes: NoteSynchronizer = Depends(get_note_synchronizer),
    tasks: TaskSynchronizer = Depends(get_task_synchronizer),
):
    """Notes created and tasks due on one day."""
    note_list = await notes.reload()
    task_list = await tasks.reload()
    return CalendarDay(
        day=day,
        notes=[NoteRead.model_validate(n) for n in notes_for_date(note_list, day)],
        tasks=[TaskRead.model_validate(t) for t in tasks_for_date(task_list, day)],
    )


@router.get("/{year}/{month}", response_model=CalendarMonth)
async def get_month(
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
    notes: NoteSynchronizer = Depends(get_note_synchronizer),
    tasks: TaskSynchronizer = Depends(get_task_synchronizer),
):
    try:
        days = month_calendar(await notes.reload(), await tasks.reload(), year, month)
    except ValueError as err:
        raise HTTPException(status_code=400, detail=str(err)) from err
    return CalendarMonth(
        year=year,
        month=month,
        days=[
            CalendarDay(
                day=day,
                notes=[NoteRead.model_validate(n) for n in day_notes],
                tasks=[TaskRead.model_validate(t) for t in day_tasks],
            )
            for day, (day_notes, day_tasks) in days.items()
        ],
    )
