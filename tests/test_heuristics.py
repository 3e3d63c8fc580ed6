"""Unit tests for the local fallback heuristics."""

from __future__ import annotations

from tilenotes.core.services.heuristics import (
    extract_basic_tags,
    extract_basic_tasks,
    truncate_summary,
)


def test_tags_skip_stop_words_and_short_words() -> None:
    """Only words longer than three characters that are not stop words count."""
    tags = extract_basic_tags("The cat and the dog went to the park with their owner")

    assert "the" not in tags
    assert "cat" not in tags
    assert tags == ["went", "park", "owner"]


def test_tags_rank_by_frequency_then_first_occurrence() -> None:
    """Repeated words come first; ties keep their order of appearance."""
    content = "budget review budget planning review budget offsite"

    assert extract_basic_tags(content) == ["budget", "review", "planning", "offsite"]


def test_tags_are_capped() -> None:
    content = "alpha bravo charlie delta echoes foxtrot golfing"

    assert extract_basic_tags(content, limit=5) == ["alpha", "bravo", "charlie", "delta", "echoes"]


def test_tasks_from_bold_checkboxes_and_prefixes() -> None:
    content = (
        "Meeting notes\n"
        "We should **send the agenda** before Friday.\n"
        "- [ ] book a room\n"
        "TODO: call the caterer\n"
        "TASK draft the budget\n"
    )

    assert extract_basic_tasks(content) == [
        "send the agenda",
        "book a room",
        "call the caterer",
        "draft the budget",
    ]


def test_tasks_deduplicate_and_drop_short_fragments() -> None:
    content = "**Buy milk** and **ok** then **Buy milk** again"

    assert extract_basic_tasks(content) == ["Buy milk"]


def test_todo_must_start_a_line() -> None:
    """A TODO in the middle of a sentence is not an action item."""
    assert extract_basic_tasks("nothing marked as todo here really") == []


def test_summary_only_for_long_content() -> None:
    assert truncate_summary("short note", budget=100) is None

    long_text = "word " * 40
    summary = truncate_summary(long_text, budget=100)

    assert summary is not None
    assert summary.endswith("...")
    assert len(summary) <= 103
