from __future__ import annotations

from datetime import date  # noqa: TCH003
from enum import Enum

from pydantic import Field, field_validator

from tilenotes.core.models.base import AppBaseModel
from tilenotes.core.models.note import NoteType  # noqa: TCH001
from tilenotes.utils.validation import normalize_tags


class NoteSortField(str, Enum):
    DATE = "date"
    TITLE = "title"
    UPDATED = "updated"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TaskStatus(str, Enum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class NoteFilter(AppBaseModel):
    """Search and filter state of the grid view.

    Without `sort_by` the pinned-first grid order is kept.
    """

    query: str | None = None
    tags: list[str] = Field(default_factory=list, description="Match notes carrying any of these tags")
    note_type: NoteType | None = None
    date_from: date | None = None
    date_to: date | None = None
    pinned_only: bool = False
    sort_by: NoteSortField | None = None
    sort_order: SortOrder = SortOrder.DESC

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)

    @field_validator("query")
    @classmethod
    def blank_query(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class TaskFilter(AppBaseModel):
    status: TaskStatus = TaskStatus.ALL
    query: str | None = None
    note_id: str | None = None
