from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional

import httpx
from elevenlabs import VoiceSettings
from elevenlabs.client import AsyncElevenLabs
from elevenlabs.core import ApiError

from ..errors import (
    AuthFailure,
    ConfigurationFailure,
    DreamTalesError,
    QuotaFailure,
    RateLimitFailure,
    SynthesisFailure,
)
from ..models.narration import SubscriptionInfo, SynthesizedAudio, TTSConfig

logger = logging.getLogger(__name__)

ELEVENLABS_API_URL = "https://api.elevenlabs.io/v1"
MAX_CHARS = 5_000  # ElevenLabs practical per-request limit
WORDS_PER_SECOND = 2.5  # ~150 words per minute

_CONTENT_TYPES = {
    "mp3": "audio/mpeg",
    "pcm": "audio/pcm",
    "ulaw": "audio/basic",
    "opus": "audio/opus",
}

_SENTENCE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+$")
_WORD = re.compile(r"\s*\S+")


def content_type_for(output_format: str) -> str:
    return _CONTENT_TYPES.get(output_format.split("_", 1)[0], "audio/mpeg")


def estimate_duration(text: str) -> int:
    """Estimated narration length in seconds."""
    words = len(text.split())
    return math.ceil(words / WORDS_PER_SECOND)


def split_text_for_tts(text: str, max_chars: int = MAX_CHARS) -> list[str]:
    """Split text into chunks of at most max_chars, preferring sentence then word boundaries."""
    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    current = ""

    def flush() -> None:
        nonlocal current
        if current.strip():
            chunks.append(current.strip())
        current = ""

    for sentence in _SENTENCE.findall(text):
        if len(current) + len(sentence) <= max_chars:
            current += sentence
            continue
        flush()
        if len(sentence) <= max_chars:
            current = sentence
            continue

        for word in _WORD.findall(sentence):
            if len(current) + len(word) <= max_chars:
                current += word
                continue
            flush()
            word = word.strip()
            while len(word) > max_chars:
                chunks.append(word[:max_chars])
                word = word[max_chars:]
            current = word

    flush()
    return chunks


def _error_body(exc: ApiError) -> str:
    return str(exc.body or "").lower()


def _translate_api_error(exc: ApiError) -> DreamTalesError:
    body = _error_body(exc)
    # ElevenLabs reports an exhausted quota as a 401 with a quota_exceeded status
    if exc.status_code == 402 or "quota" in body:
        return QuotaFailure()
    if exc.status_code == 401:
        return AuthFailure("Invalid API key. Please check your ElevenLabs API configuration.")
    if exc.status_code == 429:
        return RateLimitFailure()
    return SynthesisFailure()


class NarrationClient:
    """ElevenLabs text-to-speech with settings tuned for bedtime narration."""

    def __init__(
        self,
        api_key: str,
        *,
        client: Any = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        base_url: str = ELEVENLABS_API_URL,
    ) -> None:
        self._api_key = api_key
        self._client = client
        self._transport = transport
        self._base_url = base_url

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or self._client is not None

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise ConfigurationFailure(
                    "Text-to-speech service is not configured. Please add your ElevenLabs API key."
                )
            self._client = AsyncElevenLabs(api_key=self._api_key)
        return self._client

    async def synthesize(self, text: str, config: Optional[TTSConfig] = None) -> SynthesizedAudio:
        config = config or TTSConfig()
        client = self._get_client()
        try:
            audio_stream = client.text_to_speech.convert(
                text=text,
                voice_id=config.voice_id,
                model_id=config.model_id,
                output_format=config.output_format,
                voice_settings=VoiceSettings(
                    stability=config.stability,
                    similarity_boost=config.similarity_boost,
                    style=config.style,
                    use_speaker_boost=config.speaker_boost,
                ),
            )
            chunks = []
            async for chunk in audio_stream:
                if isinstance(chunk, bytes):
                    chunks.append(chunk)
        except ApiError as exc:
            logger.error("ElevenLabs API error %s: %s", exc.status_code, exc.body)
            raise _translate_api_error(exc) from exc
        except httpx.HTTPError as exc:
            logger.error("ElevenLabs request failed: %s", exc)
            raise SynthesisFailure() from exc

        audio_bytes = b"".join(chunks)
        if not audio_bytes:
            logger.error("ElevenLabs returned no audio for %d chars", len(text))
            raise SynthesisFailure()

        logger.info("Synthesized %d bytes of audio for %d chars", len(audio_bytes), len(text))
        return SynthesizedAudio(audio_bytes=audio_bytes, content_type=content_type_for(config.output_format))

    async def _get(self, path: str) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers={"xi-api-key": self._api_key},
            transport=self._transport,
            timeout=20,
        ) as http:
            return await http.get(path)

    async def subscription_info(self) -> Optional[SubscriptionInfo]:
        if not self._api_key:
            return None
        try:
            response = await self._get("/user/subscription")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("ElevenLabs subscription lookup failed: %s", exc)
            return None
        return SubscriptionInfo(
            character_count=data.get("character_count") or 0,
            character_limit=data.get("character_limit") or 0,
            voice_count=data.get("voice_count") or 0,
            voice_limit=data.get("voice_limit") or 0,
        )

    async def check_connection(self) -> bool:
        if not self._api_key:
            return False
        try:
            response = await self._get("/voices")
        except httpx.HTTPError as exc:
            logger.warning("ElevenLabs connection test failed: %s", exc)
            return False
        return response.is_success
