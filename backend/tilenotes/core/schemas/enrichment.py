from __future__ import annotations

from enum import Enum

from pydantic import Field

from tilenotes.core.models.base import AppBaseModel


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class NoteAnalysis(AppBaseModel):
    """Structured completion output for one note.

    Every field is required so the schema stays valid for strict structured
    outputs; the model sends null for a missing summary.
    """

    tags: list[str] = Field(description="3-5 single-word lowercase tags, no hashtags")
    summary: str | None = Field(description="Summary of at most 100 words, or null for short notes")
    tasks: list[str] = Field(description="Action items: imperative statements, to-dos or bold text")
    sentiment: Sentiment = Field(description="Overall tone of the note")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "tags": ["groceries", "weekend", "family"],
                    "summary": None,
                    "tasks": ["Buy milk", "Book the dentist"],
                    "sentiment": "neutral",
                }
            ]
        }
    }
