from __future__ import annotations

from functools import lru_cache

from openai import AsyncOpenAI

from tilenotes.config import settings
from tilenotes.utils.logging import get_logger


@lru_cache(maxsize=1)
def get_openai_client() -> AsyncOpenAI:
    """Shared client for enrichment, image captions and transcription.

    SDK retries are off: every caller has a local fallback, so one failed
    attempt is reported straight away.
    """
    logger = get_logger(__name__)
    options = {"timeout": settings.openai_timeout, "max_retries": 0}
    if settings.openai_api_key:
        logger.debug("Initializing OpenAI client with APP_OPENAI_API_KEY")
        return AsyncOpenAI(api_key=settings.openai_api_key, **options)
    logger.debug("Initializing OpenAI client from environment")
    return AsyncOpenAI(**options)
