from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

    from tilenotes.core.models.settings import UserSettings


class SettingsRepository(ABC):
    """Read/write access to the single `user_settings` row of each user."""

    @abstractmethod
    async def get(self, user_id: UUID) -> UserSettings | None:  # pragma: no cover - interface only
        ...

    @abstractmethod
    async def create(self, user_settings: UserSettings) -> UserSettings:  # pragma: no cover
        ...

    @abstractmethod
    async def update_fields(self, user_id: UUID, changes: dict[str, Any]) -> UserSettings | None:  # pragma: no cover
        ...

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:  # pragma: no cover
        ...
