from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field


class AppBaseModel(PydanticBaseModel):
    """Shared config: rows load from Supabase dicts and unknown keys are rejected."""

    model_config = ConfigDict(
        from_attributes=True,
        extra="forbid",
        populate_by_name=True,
    )


class TimestampedModel(AppBaseModel):
    """Record with the `created_at`/`updated_at` columns every table carries."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None


class OwnedRecord(TimestampedModel):
    """Row addressed by its own id and visible only to `user_id` under RLS."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID = Field(description="Owner of the record")
