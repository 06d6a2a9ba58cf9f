import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from ..config import settings
from ..dependencies import get_narration_client, get_tts_config
from ..errors import DreamTalesError
from ..models.narration import SynthesizeRequest, TTSConfig
from ..services.narration_service import NarrationClient, estimate_duration

router = APIRouter(tags=["Narration"])
logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# POST /synthesize
# Story text → ElevenLabs → audio with duration headers
# ─────────────────────────────────────────────

@router.post("/synthesize", response_class=Response)
async def synthesize_route(
    request: SynthesizeRequest,
    client: NarrationClient = Depends(get_narration_client),
    config: TTSConfig = Depends(get_tts_config),
) -> Response:
    try:
        audio = await client.synthesize(request.text, config)
    except DreamTalesError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception:
        logger.exception("Text-to-speech failed for story %s", request.story_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate audio. Please try again.",
        )

    return Response(
        content=audio.audio_bytes,
        media_type=audio.content_type,
        headers={
            "Content-Length": str(len(audio.audio_bytes)),
            "X-Story-Id": request.story_id,
            "X-Audio-Duration": str(estimate_duration(request.text)),
            "Cache-Control": f"public, max-age={settings.audio_cache_seconds}",
        },
    )
