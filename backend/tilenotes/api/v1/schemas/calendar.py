from __future__ import annotations

from datetime import date  # noqa: TCH003

from pydantic import Field

from tilenotes.api.v1.schemas.note import NoteRead  # noqa: TCH001
from tilenotes.api.v1.schemas.task import TaskRead  # noqa: TCH001
from tilenotes.core.models.base import AppBaseModel


class CalendarDay(AppBaseModel):
    day: date
    notes: list[NoteRead] = Field(default_factory=list)
    tasks: list[TaskRead] = Field(default_factory=list)


class CalendarMonth(AppBaseModel):
    year: int
    month: int
    days: list[CalendarDay]
