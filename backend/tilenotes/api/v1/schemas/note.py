from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from tilenotes.api.v1.schemas.task import TaskRead  # noqa: TCH001
from tilenotes.core.models.base import AppBaseModel
from tilenotes.core.models.note import NoteType
from tilenotes.utils.validation import normalize_color, normalize_tags


class NoteCreate(AppBaseModel):
    title: str | None = Field(default=None, max_length=255, description="Blank titles get a per-type placeholder")
    content: str = Field(default="", description="Note body or image data URI")
    note_type: NoteType = Field(default=NoteType.TEXT, description="Type of note")
    tags: list[str] = Field(default_factory=list, description="User tags")
    pinned: bool = False
    color: str | None = Field(default=None, description="Hex color; defaults to the user's preference")
    position_x: int = Field(default=0, ge=0)
    position_y: int = Field(default=0, ge=0)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return normalize_color(v) if v else None


class NoteUpdate(AppBaseModel):
    """Partial update; AI-derived fields are deliberately absent."""

    title: str | None = Field(default=None, max_length=255)
    content: str | None = None
    note_type: NoteType | None = None
    tags: list[str] | None = None
    pinned: bool | None = None
    color: str | None = None
    position_x: int | None = Field(default=None, ge=0)
    position_y: int | None = Field(default=None, ge=0)
    is_archived: bool | None = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return normalize_tags(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return normalize_color(v) if v is not None else None


class NoteRead(AppBaseModel):
    id: UUID
    user_id: UUID
    title: str | None
    content: str
    note_type: NoteType
    tags: list[str]
    ai_tags: list[str]
    ai_summary: str | None
    ai_processed_at: datetime | None
    pinned: bool
    color: str
    position_x: int
    position_y: int
    is_archived: bool
    created_at: datetime
    updated_at: datetime | None


class NoteReorderRequest(AppBaseModel):
    """Drop of one tile onto another in the grid."""

    dragged_id: UUID
    target_id: UUID


class NoteReorderResponse(AppBaseModel):
    dragged: NoteRead
    target: NoteRead


class EnrichmentResponse(AppBaseModel):
    note: NoteRead
    tasks: list[TaskRead]
