from __future__ import annotations

import re
from datetime import datetime  # noqa: TCH003
from typing import Any
from uuid import UUID  # noqa: TCH003

from pydantic import BaseModel, Field, field_validator

from tilenotes.core.models.base import AppBaseModel
from tilenotes.utils.validation import normalize_color

_EMAIL_TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class UserSettingsUpdate(AppBaseModel):
    daily_task_summary: bool | None = None
    email_time: str | None = Field(default=None, description="HH:MM, 24h clock")
    timezone: str | None = Field(default=None, min_length=1, max_length=64)
    default_note_color: str | None = None
    auto_ai_processing: bool | None = None

    @field_validator("email_time")
    @classmethod
    def validate_email_time(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not _EMAIL_TIME.match(v):
            raise ValueError("email_time must be HH:MM")
        return v

    @field_validator("default_note_color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return normalize_color(v) if v is not None else None


class UserSettingsRead(AppBaseModel):
    user_id: UUID
    daily_task_summary: bool
    email_time: str
    timezone: str
    default_note_color: str
    auto_ai_processing: bool
    created_at: datetime
    updated_at: datetime | None = None


class DataExport(BaseModel):
    """Downloadable backup of everything a user owns."""

    notes: list[dict[str, Any]]
    tasks: list[dict[str, Any]]
    settings: dict[str, Any] | None
    export_date: datetime
    version: str = "1.0"


class DeleteAllResponse(BaseModel):
    notes_deleted: int
    tasks_deleted: int
    settings_deleted: bool
