from __future__ import annotations

from typing import TYPE_CHECKING

from tilenotes.config import settings
from tilenotes.core.errors import CompletionServiceError
from tilenotes.core.models.note import NoteType
from tilenotes.core.schemas.enrichment import NoteAnalysis, Sentiment
from tilenotes.core.services.heuristics import (
    extract_basic_tags,
    extract_basic_tasks,
    truncate_summary,
)
from tilenotes.utils.logging import get_logger
from tilenotes.utils.openai_client import get_openai_client
from tilenotes.utils.validation import normalize_tags

if TYPE_CHECKING:
    from tilenotes.core.models.note import Note

logger = get_logger(__name__)

TRANSCRIPTION_UNAVAILABLE = "Transcription unavailable"
IMAGE_DESCRIPTION_UNAVAILABLE = "Image description unavailable"
MIN_SUMMARY_LENGTH = 10

INSTRUCTIONS = (
    "You analyze personal notes and extract structured information. "
    "Return JSON only, matching the provided schema.\n"
    "- tags: 3-5 relevant single-word tags, lowercase, no hashtags.\n"
    "- summary: at most 100 words, only when the note is longer than 50 words; otherwise null.\n"
    "- tasks: action items found in imperative statements, to-dos or bold text; empty if none.\n"
    "- sentiment: positive, negative or neutral."
)


def fallback_analysis(content: str) -> NoteAnalysis:
    """Heuristic analysis used when the completion service is unavailable."""
    return NoteAnalysis(
        tags=extract_basic_tags(content, limit=settings.max_ai_tags),
        summary=truncate_summary(content, budget=settings.fallback_summary_length),
        tasks=extract_basic_tasks(content, limit=settings.max_extracted_tasks),
        sentiment=Sentiment.NEUTRAL,
    )


async def request_analysis(*, content: str, note_type: NoteType) -> NoteAnalysis:
    """Ask the completion service for tags, summary, tasks and sentiment.

    Raises CompletionServiceError on any failure; callers decide whether to
    fall back.
    """
    client = get_openai_client()
    try:
        response = await client.responses.parse(
            model=settings.enrichment_model,
            input=[
                {"role": "system", "content": INSTRUCTIONS},
                {
                    "role": "user",
                    "content": f"Note type: {note_type.value}\n\nNOTE:\n{content}",
                },
            ],
            reasoning={"effort": settings.enrichment_model_reasoning},
            text={"verbosity": "low"},
            text_format=NoteAnalysis,
        )
    except Exception as err:
        raise CompletionServiceError(f"Completion request failed: {err}") from err

    if getattr(response, "refusal", None):
        raise CompletionServiceError(f"Completion refused: {response.refusal}")

    result = getattr(response, "output_parsed", None)
    if not isinstance(result, NoteAnalysis):
        raise CompletionServiceError("Completion returned no parsable analysis")
    return result


def _clean_analysis(analysis: NoteAnalysis) -> NoteAnalysis:
    summary = (analysis.summary or "").strip()
    tasks: list[str] = []
    for task in analysis.tasks:
        cleaned = task.strip() if isinstance(task, str) else ""
        if cleaned and cleaned not in tasks:
            tasks.append(cleaned)
    return NoteAnalysis(
        tags=normalize_tags(analysis.tags, limit=settings.max_ai_tags),
        summary=summary if len(summary) > MIN_SUMMARY_LENGTH else None,
        tasks=tasks[: settings.max_extracted_tasks],
        sentiment=analysis.sentiment,
    )


async def analyze_note_content(*, content: str, note_type: NoteType = NoteType.TEXT) -> NoteAnalysis:
    """Analyze note text, degrading silently to the local heuristics."""
    logger.info("Analyzing %s note content (%d chars)", note_type.value, len(content or ""))
    try:
        analysis = await request_analysis(content=content, note_type=note_type)
    except CompletionServiceError as err:
        logger.warning("Completion service failed, using heuristics: %s", err)
        return fallback_analysis(content)
    return _clean_analysis(analysis)


async def describe_image(image_url: str) -> str:
    """Caption an image (URL or data URI) in one or two sentences."""
    client = get_openai_client()
    try:
        response = await client.responses.create(
            model=settings.vision_model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_text",
                            "text": "Describe this image in 1-2 sentences. Focus on the main subject and key details.",
                        },
                        {"type": "input_image", "image_url": image_url},
                    ],
                }
            ],
        )
    except Exception as err:  # pragma: no cover - network errors
        logger.error("Image description failed: %s", err)
        return IMAGE_DESCRIPTION_UNAVAILABLE
    return (getattr(response, "output_text", "") or "").strip() or IMAGE_DESCRIPTION_UNAVAILABLE


async def transcribe_audio(data: bytes, filename: str = "audio.webm") -> str:
    """Speech-to-text for a recorded voice note."""
    if not data:
        return TRANSCRIPTION_UNAVAILABLE
    client = get_openai_client()
    try:
        result = await client.audio.transcriptions.create(
            model=settings.transcription_model,
            file=(filename, data),
        )
    except Exception as err:  # pragma: no cover - network errors
        logger.error("Transcription failed: %s", err)
        return TRANSCRIPTION_UNAVAILABLE
    return (getattr(result, "text", "") or "").strip() or TRANSCRIPTION_UNAVAILABLE


async def analyze_note(note: Note) -> NoteAnalysis:
    """Pick the right input for the note type and analyze it.

    Image notes are captioned first and the caption doubles as the summary.
    Voice notes already hold their transcription (or its placeholder).
    """
    content = note.content or ""
    if note.note_type is NoteType.IMAGE and _looks_like_image(content):
        description = await describe_image(content)
        if description == IMAGE_DESCRIPTION_UNAVAILABLE:
            return await analyze_note_content(content="Image content", note_type=NoteType.IMAGE)
        analysis = await analyze_note_content(content=description, note_type=NoteType.IMAGE)
        return analysis.model_copy(update={"summary": description})

    return await analyze_note_content(content=content, note_type=note.note_type)


def _looks_like_image(content: str) -> bool:
    return content.startswith("data:image") or content.startswith(("http://", "https://"))
