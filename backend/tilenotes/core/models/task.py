from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from .base import OwnedRecord


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def parse_due(value: str | None) -> datetime | None:
    """Best-effort parse of the free-text due date/reminder columns.

    Returns an aware UTC datetime, or None when the text is not ISO-8601.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class Task(OwnedRecord):
    """Action item, created by hand or extracted from a note."""

    note_id: UUID | None = Field(default=None, description="Source note for extracted tasks")

    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    is_completed: bool = False

    # Stored as text on purpose: clients send whatever their date pickers emit
    due_date: str | None = None
    reminder_time: str | None = None

    priority: TaskPriority = TaskPriority.MEDIUM
    completed_at: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Task title must not be empty")
        return stripped

    @property
    def due_at(self) -> datetime | None:
        return parse_due(self.due_date)

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.is_completed:
            return False
        due = self.due_at
        if due is None:
            return False
        return due < (now or datetime.now(UTC))
