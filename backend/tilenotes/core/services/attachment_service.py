from __future__ import annotations

import re
from typing import TYPE_CHECKING
from uuid import uuid4

from tilenotes.api.v1.schemas.attachment import AttachmentRead
from tilenotes.core.models.attachment import Attachment, AttachmentType
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from tilenotes.core.repositories.attachment_repository import AttachmentRepository

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def storage_path_for(user_id: UUID, note_id: UUID, file_name: str) -> str:
    """Bucket key `<user_id>/<note_id>/<uuid>-<file_name>`."""
    safe_name = _UNSAFE_CHARS.sub("_", file_name).strip("_") or "file"
    return f"{user_id}/{note_id}/{uuid4()}-{safe_name}"


class AttachmentService:
    def __init__(self, repo: AttachmentRepository) -> None:
        self._repo = repo

    def _to_read(self, attachment: Attachment) -> AttachmentRead:
        return AttachmentRead(
            **attachment.model_dump(exclude={"ai_processed_at"}),
            public_url=self._repo.public_url(attachment.storage_path),
        )

    async def upload(
        self,
        *,
        user_id: UUID,
        note_id: UUID,
        file_name: str,
        data: bytes,
        content_type: str | None,
    ) -> AttachmentRead:
        if not data:
            raise ValueError("Uploaded file is empty")
        content_type = content_type or "application/octet-stream"
        path = storage_path_for(user_id, note_id, file_name)

        stored_path = await self._repo.upload_object(path, data, content_type)
        attachment = await self._repo.create(
            Attachment(
                note_id=note_id,
                user_id=user_id,
                file_name=file_name[:255],
                file_type=AttachmentType.from_content_type(content_type),
                file_size=len(data),
                storage_path=stored_path,
            )
        )
        logger.info(
            "Stored attachment",
            extra={"note_id": str(note_id), "path": stored_path, "size": len(data)},
        )
        return self._to_read(attachment)

    async def list_for_note(self, note_id: UUID) -> list[AttachmentRead]:
        return [self._to_read(a) for a in await self._repo.list_for_note(note_id)]
