import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_generation_client
from ..errors import DreamTalesError
from ..models.story import (
    GenerateStoryResponse,
    StoryRequest,
    SuggestInterestsRequest,
    SuggestInterestsResponse,
)
from ..services.story_service import StoryGenerationClient

router = APIRouter(tags=["Stories"])
logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# POST /generate
# Build prompt → Gemini → parse + sanitize
# ─────────────────────────────────────────────

@router.post("/generate", response_model=GenerateStoryResponse, response_model_exclude_none=True)
async def generate_route(
    request: StoryRequest,
    client: StoryGenerationClient = Depends(get_generation_client),
) -> GenerateStoryResponse:
    try:
        story = await client.generate(request)
    except DreamTalesError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception:
        logger.exception("Story generation failed for %r", request.child_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate story. Please try again.",
        )

    return GenerateStoryResponse(success=True, story=story)


# ─────────────────────────────────────────────
# POST /suggest-interests
# Age-appropriate story themes from Gemini
# ─────────────────────────────────────────────

@router.post(
    "/suggest-interests",
    response_model=SuggestInterestsResponse,
    response_model_exclude_none=True,
)
async def suggest_interests_route(
    request: SuggestInterestsRequest,
    client: StoryGenerationClient = Depends(get_generation_client),
) -> SuggestInterestsResponse:
    try:
        suggestions = await client.suggest_interests(request.age, request.current_interests)
    except DreamTalesError as exc:
        logger.warning("Suggest interests failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate suggestions",
        )
    except Exception:
        logger.exception("Suggest interests failed for age %d", request.age)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate suggestions",
        )

    return SuggestInterestsResponse(success=True, suggestions=suggestions)
