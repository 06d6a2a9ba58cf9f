"""Story history and form prefill persistence over a KeyValueStorage."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from ..errors import PersistenceFailure, ValidationFailure
from ..models.story import STORY_LENGTHS, DEFAULT_STORY_LENGTH, FormPrefill, Story, StoryRequest
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "dreamtales_stories"
LAST_FORM_DATA_KEY = "dreamtales_last_form_data"
MAX_STORIES = 50  # keeps browser storage well under its quota

_story_list = TypeAdapter(list[Story])


class StoryStore:
    """Newest-first story history, capped at max_stories."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        max_stories: int = MAX_STORIES,
    ) -> None:
        self._storage = storage
        self._key = key
        self._max_stories = max_stories

    def _read(self) -> list[Story]:
        try:
            raw = self._storage.get(self._key)
        except OSError as e:
            logger.warning("Could not read stored stories: %s", e)
            return []
        if not raw:
            return []
        try:
            return _story_list.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding corrupt stored stories: %s", e.error_count())
            return []

    def _write(self, stories: list[Story]) -> None:
        payload = json.dumps([s.model_dump(mode="json", by_alias=True) for s in stories])
        try:
            self._storage.set(self._key, payload)
        except OSError as e:
            logger.error("Failed to save stories: %s", e)
            raise PersistenceFailure() from e

    def list(self) -> list[Story]:
        return sorted(self._read(), key=lambda s: s.created_at, reverse=True)

    def get_by_id(self, story_id: str) -> Optional[Story]:
        return next((s for s in self.list() if s.id == story_id), None)

    def save(self, story: Story) -> None:
        """Insert or replace by id. New stories go first; the oldest fall off past the cap."""
        stories = self.list()
        for index, existing in enumerate(stories):
            if existing.id == story.id:
                stories[index] = story
                break
        else:
            stories.insert(0, story)
        self._write(stories[: self._max_stories])
        logger.info("Saved story %s (%d stored)", story.id, min(len(stories), self._max_stories))

    def update(self, story_id: str, **fields: Any) -> Optional[Story]:
        if "id" in fields and fields["id"] != story_id:
            raise ValidationFailure("A story's id cannot be changed.")
        stories = self.list()
        for index, existing in enumerate(stories):
            if existing.id == story_id:
                break
        else:
            return None

        try:
            updated = Story.model_validate({**existing.model_dump(), **fields})
        except ValidationError as e:
            raise ValidationFailure(f"Invalid story update: {e.errors()[0]['msg']}") from e
        stories[index] = updated
        self._write(stories)
        return updated

    def attach_audio(self, story_id: str, audio_url: str, audio_duration: float) -> Optional[Story]:
        return self.update(story_id, audio_url=audio_url, audio_duration=audio_duration)

    def delete(self, story_id: str) -> bool:
        stories = self.list()
        remaining = [s for s in stories if s.id != story_id]
        if len(remaining) == len(stories):
            return False
        self._write(remaining)
        return True

    def clear(self) -> None:
        try:
            self._storage.remove(self._key)
        except OSError as e:
            raise PersistenceFailure("Failed to clear stored stories.") from e

    def is_available(self) -> bool:
        probe = "__storage_test__"
        try:
            self._storage.set(probe, probe)
            self._storage.remove(probe)
        except OSError:
            return False
        return True


class FormPrefillStore:
    """Remembers the last submitted form so the next one starts filled in."""

    def __init__(self, storage: KeyValueStorage, key: str = LAST_FORM_DATA_KEY) -> None:
        self._storage = storage
        self._key = key

    def save(self, request: StoryRequest) -> None:
        try:
            self._storage.set(self._key, request.model_dump_json(by_alias=True))
        except OSError as e:
            logger.error("Failed to save form data: %s", e)
            raise PersistenceFailure("Failed to save form data.") from e

    def load(self) -> Optional[FormPrefill]:
        try:
            raw = self._storage.get(self._key)
            if not raw:
                return None
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load saved form data: %s", e)
            return None
        if not isinstance(data, dict):
            return None

        if data.get("storyLength") not in (None, *STORY_LENGTHS):
            data["storyLength"] = DEFAULT_STORY_LENGTH
        try:
            return FormPrefill.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring invalid saved form data: %s", e.error_count())
            return None
