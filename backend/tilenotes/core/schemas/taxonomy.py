from __future__ import annotations

from pydantic import Field

from tilenotes.core.models.base import AppBaseModel


class TagCount(AppBaseModel):
    tag: str
    count: int
    ai_generated: bool = Field(default=False, description="True when the tag only appears as an AI tag")


class NoteTaxonomy(AppBaseModel):
    """Tag vocabulary of a user's workspace.

    - tag_vocab: unique normalized tags, alphabetical
    - tag_counts: tags by usage, most used first (sidebar order)
    """

    tag_vocab: list[str] = Field(default_factory=list)
    tag_counts: list[TagCount] = Field(default_factory=list)
