from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from enum import Enum

from pydantic import Field, field_validator

from tilenotes.utils.validation import normalize_tags

from .base import OwnedRecord

DEFAULT_NOTE_COLOR = "#FFFACD"

# Columns written only by the enrichment job
AI_FIELDS = frozenset({"ai_tags", "ai_summary", "ai_processed_at"})


class NoteType(str, Enum):
    """Kind of content a tile holds."""

    TEXT = "text"
    VOICE = "voice"
    IMAGE = "image"
    LINK = "link"

    @property
    def placeholder_title(self) -> str:
        return f"New {self.value} note"

    @property
    def default_color(self) -> str:
        return NOTE_TYPE_COLORS[self]


NOTE_TYPE_COLORS: dict[NoteType, str] = {
    NoteType.TEXT: DEFAULT_NOTE_COLOR,
    NoteType.VOICE: "#E6F3FF",
    NoteType.IMAGE: "#F0FFF0",
    NoteType.LINK: "#FFE4E1",
}


class Note(OwnedRecord):
    """A single tile in the grid, as stored in the `notes` table."""

    title: str | None = Field(default=None, max_length=255, description="Note title")
    # Image notes carry a data URI here, so there is no length cap
    content: str = Field(default="", description="Note body or image data URI")
    note_type: NoteType = Field(default=NoteType.TEXT)

    tags: list[str] = Field(default_factory=list, description="User tags, in the order given")

    ai_tags: list[str] = Field(default_factory=list)
    ai_summary: str | None = None
    ai_processed_at: datetime | None = None

    pinned: bool = False
    color: str = DEFAULT_NOTE_COLOR
    position_x: int = 0
    position_y: int = 0
    is_archived: bool = False

    @field_validator("tags", "ai_tags", mode="before")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str]:
        return normalize_tags(v)

    @property
    def position(self) -> tuple[int, int]:
        return (self.position_x, self.position_y)

    @property
    def is_enriched(self) -> bool:
        return self.ai_processed_at is not None

    @property
    def all_tags(self) -> list[str]:
        """User tags followed by AI tags not already present."""
        return self.tags + [t for t in self.ai_tags if t not in self.tags]
