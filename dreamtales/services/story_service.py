from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx
from google import genai
from google.genai import errors

from ..errors import (
    AuthFailure,
    ConfigurationFailure,
    DreamTalesError,
    GenerationFailure,
    RateLimitFailure,
)
from ..models.story import GeneratedStory, StoryRequest
from .prompt_builder import build_story_prompt
from .sanitizer import sanitize_for_speech

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-flash-latest"
SUGGESTION_MODEL = "gemini-2.0-flash"

_TITLE = re.compile(r"TITLE:\s*(.+?)(?:\n|STORY:)", re.IGNORECASE)
_STORY = re.compile(r"STORY:\s*([\s\S]+)", re.IGNORECASE)
_STORY_PREFIX = re.compile(r"^(?:\*\*)?STORY:(?:\*\*)?\s*", re.IGNORECASE)
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

# Sign-offs the model sometimes appends after the story itself
END_MARKERS = (
    "\n\n---",
    "\n\nNote:",
    "\n\n*Note:",
    "\n\nI hope",
    "\n\nSweet dreams",
)


def parse_story_response(text: str, child_name: str) -> GeneratedStory:
    title_match = _TITLE.search(text)
    title = title_match.group(1).strip() if title_match else ""
    if not title:
        title = f"{child_name}'s Magical Adventure"

    story_match = _STORY.search(text)
    content = story_match.group(1).strip() if story_match else text.strip()
    content = _STORY_PREFIX.sub("", content).strip()

    for marker in END_MARKERS:
        index = content.find(marker)
        if index > 0:
            content = content[:index].strip()

    return GeneratedStory(title=sanitize_for_speech(title), content=sanitize_for_speech(content))


def _suggestion_prompt(age: int, current_interests: list[str]) -> str:
    liked = f"They already like: {', '.join(current_interests)}" if current_interests else ""
    return f"""
You are helping suggest story themes for a {age} year old child.

{liked}

Suggest 3 age-appropriate interests/themes that would make great bedtime stories. Consider:
- What {age} year olds typically enjoy
- Themes that are calming for bedtime
- Things that spark imagination

Return ONLY a JSON array of 3 simple words or short phrases, like:
["unicorns", "friendly monsters", "space adventures"]

No explanation, just the JSON array.
""".strip()


def _translate_api_error(exc: errors.APIError) -> DreamTalesError:
    message = str(exc)
    lowered = message.lower()
    if exc.code in (401, 403) or "api key" in lowered or "api_key_invalid" in lowered:
        return AuthFailure("Invalid API key. Please check your Gemini API configuration.")
    if exc.code == 429 or "quota" in lowered or "rate limit" in lowered or "resource_exhausted" in lowered:
        return RateLimitFailure("API rate limit reached. Please try again in a few moments.")
    return GenerationFailure()


class StoryGenerationClient:
    """Gemini-backed story writer. One provider call per request, never retried."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        suggestion_model: str = SUGGESTION_MODEL,
        client: Any = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._suggestion_model = suggestion_model
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or self._client is not None

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise ConfigurationFailure(
                    "Story generation service is not configured. Please add your Gemini API key."
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def _complete(self, prompt: str, *, model: str) -> str:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
            )
        except errors.APIError as exc:
            logger.error("Gemini API error %s: %s", exc.code, exc)
            raise _translate_api_error(exc) from exc
        except httpx.HTTPError as exc:
            logger.error("Gemini request failed: %s", exc)
            raise GenerationFailure() from exc
        except Exception as exc:
            logger.exception("Unexpected Gemini client error")
            raise GenerationFailure() from exc

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            logger.error("Gemini returned an empty response")
            raise GenerationFailure()
        return text

    async def generate(self, request: StoryRequest) -> GeneratedStory:
        prompt = build_story_prompt(request)
        raw = await self._complete(prompt, model=self._model)
        story = parse_story_response(raw, request.child_name)
        if not story.content:
            raise GenerationFailure()
        logger.info("Generated story %r (%d chars)", story.title, len(story.content))
        return story

    async def suggest_interests(self, age: int, current_interests: list[str] | None = None) -> list[str]:
        raw = await self._complete(
            _suggestion_prompt(age, current_interests or []),
            model=self._suggestion_model,
        )
        match = _JSON_ARRAY.search(raw)
        if not match:
            logger.warning("No JSON array in interest suggestions: %r", raw[:200])
            raise GenerationFailure("Failed to generate suggestions")
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise GenerationFailure("Failed to generate suggestions") from exc
        if not isinstance(parsed, list):
            raise GenerationFailure("Failed to generate suggestions")
        return [str(item).strip() for item in parsed if str(item).strip()][:3]

    async def check_connection(self) -> bool:
        try:
            text = await self._complete("Say 'Hello' in one word.", model=self._model)
        except DreamTalesError as exc:
            logger.warning("Gemini connection test failed: %s", exc)
            return False
        return "hello" in text.lower()
