from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tilenotes.core.models.attachment import Attachment


class AttachmentRepository(ABC):
    """Attachment rows plus the object-storage bucket that holds their bytes."""

    @abstractmethod
    async def upload_object(self, path: str, data: bytes, content_type: str) -> str:  # pragma: no cover
        """Store `data` at `path` in the bucket and return the stored path."""

    @abstractmethod
    def public_url(self, path: str) -> str:  # pragma: no cover
        ...

    @abstractmethod
    async def create(self, attachment: Attachment) -> Attachment:  # pragma: no cover
        ...

    @abstractmethod
    async def list_for_note(self, note_id: UUID) -> Sequence[Attachment]:  # pragma: no cover
        ...
