from __future__ import annotations

import logging
import sys

from tilenotes.config import settings

# Transport loggers under supabase-py and openai; they log every request at INFO
_CLIENT_LOGGERS = ("httpx", "httpcore", "hpack", "openai")


def setup_logging() -> None:
    """Configure root logging for the TileNotes API process."""

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout
    )

    for name in ("uvicorn", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(logging.INFO)
    for name in _CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("tilenotes").info(
        "Logging configured",
        extra={"level": settings.log_level, "debug": settings.debug},
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger under the `tilenotes.` hierarchy (module `__name__` already is)."""
    return logging.getLogger(name)
