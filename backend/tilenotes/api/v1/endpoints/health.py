from __future__ import annotations

import asyncio

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from tilenotes.config import settings
from tilenotes.db.base import create_request_supabase_client
from tilenotes.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

SERVICE_NAME = "tilenotes-api"
VERSION = "0.1.0"


@router.get("/")
async def health_check():
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": "healthy", "service": SERVICE_NAME, "version": VERSION},
    )


@router.get("/ready")
async def readiness_check():
    """Readiness: the notes table answers and an OpenAI key is configured."""
    db_status = "connected"
    try:
        client = create_request_supabase_client()
        await asyncio.to_thread(lambda: client.table("notes").select("id").limit(1).execute())
    except Exception as err:
        logger.warning("Readiness probe failed", extra={"error": str(err)[:100]})
        db_status = f"error: {err}"

    ready = db_status == "connected"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "degraded",
            "database": db_status,
            "ai_service": "configured" if settings.openai_api_key else "fallback-only",
            "api_prefix": settings.api_prefix,
        },
    )
