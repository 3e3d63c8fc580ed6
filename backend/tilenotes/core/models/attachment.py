from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field

from .base import AppBaseModel


class AttachmentType(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    DOCUMENT = "document"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> AttachmentType:
        major = (content_type or "").split("/", 1)[0].lower()
        if major == "image":
            return cls.IMAGE
        if major == "audio":
            return cls.AUDIO
        return cls.DOCUMENT


class Attachment(AppBaseModel):
    """File uploaded to object storage and linked to a note."""

    id: UUID = Field(default_factory=uuid4)
    note_id: UUID
    user_id: UUID

    file_name: str = Field(min_length=1, max_length=255)
    file_type: AttachmentType
    file_size: int | None = None
    storage_path: str

    transcription: str | None = None
    alt_text: str | None = None
    ai_processed_at: datetime | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
