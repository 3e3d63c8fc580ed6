from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from tilenotes.core.schemas.auth import AuthUser  # noqa: TCH001
from tilenotes.core.services.enrichment_service import TRANSCRIPTION_UNAVAILABLE, transcribe_audio
from tilenotes.dependencies import get_current_user
from tilenotes.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

# Whisper's upload limit
MAX_AUDIO_BYTES = 25 * 1024 * 1024


@router.post("/transcribe")
async def transcribe(
    file: UploadFile = File(...),
    current_user: AuthUser = Depends(get_current_user),
) -> dict[str, str | bool]:
    """Transcribe a recorded voice note. Falls back to a placeholder text on failure."""
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(data) > MAX_AUDIO_BYTES:
        raise HTTPException(status_code=413, detail="Audio file too large")

    text = await transcribe_audio(data, file.filename or "audio.webm")
    logger.info("Transcribed voice note", extra={"user_id": str(current_user.id), "bytes": len(data)})
    return {"text": text, "fallback": text == TRANSCRIPTION_UNAVAILABLE}
