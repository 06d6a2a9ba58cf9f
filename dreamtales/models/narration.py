from pydantic import BaseModel, ConfigDict, Field

from .story import CamelModel

# Voices suited to soothing bedtime narration
VOICE_OPTIONS: dict[str, str] = {
    "bella": "EXAVITQu4vr4xnSDxMaL",  # calm, soothing female voice
    "rachel": "21m00Tcm4TlvDq8ikWAM",  # warm, friendly female voice
    "adam": "pNInz6obpgDQGcFmaJgB",  # gentle male voice
    "josh": "TxGEqnHWrfWFTfGW9XjX",  # soothing male voice
}
DEFAULT_VOICE_ID = VOICE_OPTIONS["bella"]

MIN_TEXT_CHARS = 10
MAX_TEXT_CHARS = 10_000


class TTSConfig(BaseModel):
    """Voice settings for narration. Lower stability and similarity sound less robotic."""

    model_config = ConfigDict(frozen=True)

    voice_id: str = DEFAULT_VOICE_ID
    model_id: str = "eleven_multilingual_v2"
    stability: float = Field(0.35, ge=0.0, le=1.0)
    similarity_boost: float = Field(0.65, ge=0.0, le=1.0)
    style: float = Field(0.45, ge=0.0, le=1.0)
    speaker_boost: bool = True
    output_format: str = "mp3_44100_128"


class SynthesizedAudio(BaseModel):
    audio_bytes: bytes
    content_type: str = "audio/mpeg"


class SynthesizeRequest(CamelModel):
    text: str = Field(..., min_length=MIN_TEXT_CHARS, max_length=MAX_TEXT_CHARS)
    story_id: str = Field(..., min_length=1)


class SubscriptionInfo(BaseModel):
    character_count: int = 0
    character_limit: int = 0
    voice_count: int = 0
    voice_limit: int = 0

    @property
    def characters_remaining(self) -> int:
        return max(0, self.character_limit - self.character_count)
