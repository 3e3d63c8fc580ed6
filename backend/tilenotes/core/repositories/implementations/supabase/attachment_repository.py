from __future__ import annotations

from typing import TYPE_CHECKING

from tilenotes.core.models.attachment import Attachment
from tilenotes.core.repositories.attachment_repository import AttachmentRepository
from tilenotes.core.repositories.implementations.supabase.base import SupabaseTableRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from supabase import Client


class SupabaseAttachmentRepository(SupabaseTableRepository, AttachmentRepository):
    """`attachments` rows plus the public storage bucket holding the files."""

    TABLE_NAME = "attachments"

    def __init__(self, client: Client, bucket: str) -> None:
        super().__init__(client)
        self._bucket = bucket

    async def upload_object(self, path: str, data: bytes, content_type: str) -> str:
        await self._run(
            lambda: self._client.storage.from_(self._bucket).upload(
                path=path,
                file=data,
                file_options={"content-type": content_type, "upsert": "false"},
            )
        )
        return path

    def public_url(self, path: str) -> str:
        return self._client.storage.from_(self._bucket).get_public_url(path)

    async def create(self, attachment: Attachment) -> Attachment:
        row = self._to_row(attachment, drop_none=("ai_processed_at",))
        resp = await self._run(lambda: self._table().insert(row).execute())
        rows = self._rows(resp)
        return self._to_model(Attachment, rows[0]) if rows else attachment

    async def list_for_note(self, note_id: UUID) -> Sequence[Attachment]:
        resp = await self._run(
            lambda: self._table()
            .select("*")
            .eq("note_id", str(note_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [self._to_model(Attachment, r) for r in self._rows(resp)]
