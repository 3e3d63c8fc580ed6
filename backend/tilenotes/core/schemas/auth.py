from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field

from tilenotes.core.models.base import AppBaseModel


class AuthUser(AppBaseModel):
    """Owner resolved from the bearer JWT; every note and task query is scoped to `id`."""

    id: UUID
    email: str = ""
    role: str | None = Field(default=None, description="Supabase role claim, e.g. `authenticated`")

    @property
    def is_authenticated(self) -> bool:
        return self.role in (None, "authenticated")
