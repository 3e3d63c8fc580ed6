from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from tilenotes.core.schemas.taxonomy import NoteTaxonomy, TagCount

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tilenotes.core.models.note import Note


def tag_counts(notes: Iterable[Note], *, query: str | None = None) -> list[TagCount]:
    """Count how many notes carry each tag (user or AI), most used first."""
    counts: Counter[str] = Counter()
    user_tags: set[str] = set()
    for note in notes:
        user_tags.update(note.tags)
        counts.update(set(note.all_tags))

    needle = (query or "").strip().lower()
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        TagCount(tag=tag, count=count, ai_generated=tag not in user_tags)
        for tag, count in ranked
        if needle in tag
    ]


def build_note_taxonomy(notes: Iterable[Note], *, query: str | None = None) -> NoteTaxonomy:
    counted = tag_counts(notes, query=query)
    return NoteTaxonomy(
        tag_vocab=sorted(c.tag for c in counted),
        tag_counts=counted,
    )


def tag_vocabulary(notes: Iterable[Note]) -> list[str]:
    vocab: set[str] = set()
    for note in notes:
        vocab.update(note.all_tags)
    return sorted(vocab)
