from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from tilenotes.core.models.attachment import AttachmentType  # noqa: TCH001
from tilenotes.core.models.base import AppBaseModel


class AttachmentRead(AppBaseModel):
    id: UUID
    note_id: UUID
    user_id: UUID
    file_name: str
    file_type: AttachmentType
    file_size: int | None = None
    storage_path: str
    public_url: str
    transcription: str | None = None
    alt_text: str | None = None
    created_at: datetime
