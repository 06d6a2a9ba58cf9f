from .config import settings
from .models.narration import TTSConfig
from .services.narration_service import NarrationClient
from .services.story_service import StoryGenerationClient


def get_generation_client() -> StoryGenerationClient:
    return StoryGenerationClient(
        settings.gemini_api_key,
        model=settings.gemini_model,
        suggestion_model=settings.suggestion_model,
    )


def get_narration_client() -> NarrationClient:
    return NarrationClient(settings.elevenlabs_api_key)


def get_tts_config() -> TTSConfig:
    return TTSConfig(
        voice_id=settings.elevenlabs_voice_id,
        model_id=settings.elevenlabs_model,
        output_format=settings.elevenlabs_output_format,
    )
