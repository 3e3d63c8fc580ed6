from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from tilenotes.core.models.base import AppBaseModel
from tilenotes.core.models.task import TaskPriority


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    stripped = v.strip()
    return stripped or None


class TaskCreate(AppBaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    note_id: UUID | None = None
    due_date: str | None = None
    reminder_time: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Task title must not be empty")
        return stripped

    @field_validator("description", "due_date", "reminder_time")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


class TaskUpdate(AppBaseModel):
    title: str | None = Field(default=None, max_length=500)
    description: str | None = None
    due_date: str | None = None
    reminder_time: str | None = None
    priority: TaskPriority | None = None
    is_completed: bool | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Task title must not be empty")
        return v.strip() if v is not None else None


class TaskToggleRequest(AppBaseModel):
    completed: bool


class TaskRead(AppBaseModel):
    id: UUID
    user_id: UUID
    note_id: UUID | None
    title: str
    description: str | None
    is_completed: bool
    due_date: str | None
    reminder_time: str | None
    priority: TaskPriority
    created_at: datetime
    updated_at: datetime | None
    completed_at: datetime | None


class TaskStats(AppBaseModel):
    total: int
    completed: int
    pending: int
    overdue: int
