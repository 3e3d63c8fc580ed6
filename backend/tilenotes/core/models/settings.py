from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field

from .base import TimestampedModel
from .note import DEFAULT_NOTE_COLOR


class UserSettings(TimestampedModel):
    """Per-user preferences from the `user_settings` table."""

    user_id: UUID
    daily_task_summary: bool = True
    email_time: str = Field(default="09:00", description="Local time of the daily task e-mail")
    timezone: str = "UTC"
    default_note_color: str = DEFAULT_NOTE_COLOR
    auto_ai_processing: bool = True
