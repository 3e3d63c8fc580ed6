"""Local stand-ins for the completion service.

Used whenever the AI call fails so a note still gets tags, a summary and
extracted tasks.
"""

from __future__ import annotations

import re
from collections import Counter

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "is", "are", "was", "were", "be", "been", "have", "has",
    "had", "do", "does", "did", "will", "would", "could", "should", "may",
    "might", "can", "this", "that", "these", "those", "i", "you", "he", "she",
    "it", "we", "they", "me", "him", "her", "us", "them", "from", "into",
    "about", "then", "than", "there", "their", "what", "when", "where",
    "which", "while", "your", "just", "also", "some",
})

MIN_TAG_LENGTH = 4
MIN_TASK_LENGTH = 4

_WORD = re.compile(r"[a-z0-9][a-z0-9'_-]*")

TASK_PATTERNS = (
    re.compile(r"\*\*(.+?)\*\*"),
    re.compile(r"^\s*[-*] \[ \]\s*(.+)$", re.MULTILINE),
    re.compile(r"^\s*(?:[-*]\s*)?TODO\b:?\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*(?:[-*]\s*)?TASK\b:?\s*(.+)$", re.IGNORECASE | re.MULTILINE),
)


def extract_basic_tags(content: str, limit: int = 5) -> list[str]:
    """Most frequent non-stop-words, ties broken by first appearance."""
    words = [
        w.strip("'_-")
        for w in _WORD.findall((content or "").lower())
    ]
    candidates = [w for w in words if len(w) >= MIN_TAG_LENGTH and w not in STOP_WORDS]
    if not candidates:
        return []
    counts = Counter(candidates)
    first_seen = {w: i for i, w in reversed(list(enumerate(candidates)))}
    ranked = sorted(counts, key=lambda w: (-counts[w], first_seen[w]))
    return ranked[:limit]


def extract_basic_tasks(content: str, limit: int = 5) -> list[str]:
    """Pull action items out of bold spans, unchecked boxes and TODO/TASK lines."""
    tasks: list[str] = []
    for pattern in TASK_PATTERNS:
        for match in pattern.finditer(content or ""):
            cleaned = _clean_task(match.group(1))
            if len(cleaned) >= MIN_TASK_LENGTH and cleaned not in tasks:
                tasks.append(cleaned)
    return tasks[:limit]


def _clean_task(text: str) -> str:
    cleaned = text.replace("**", "").strip()
    cleaned = re.sub(r"^\[ \]\s*", "", cleaned)
    return cleaned.strip(" -:\t")


def truncate_summary(content: str, budget: int = 100) -> str | None:
    """Return the first `budget` characters plus an ellipsis, or None if short."""
    text = (content or "").strip()
    if len(text) <= budget:
        return None
    return text[:budget].rstrip() + "..."
