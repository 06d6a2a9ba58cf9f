"""Tests for the story history and form prefill stores."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from dreamtales.errors import PersistenceFailure, ValidationFailure
from dreamtales.models.story import GeneratedStory, Story, StoryRequest
from dreamtales.persistence.storage import InMemoryStorage, JsonFileStorage, StorageQuotaExceeded
from dreamtales.persistence.story_store import (
    LAST_FORM_DATA_KEY,
    MAX_STORIES,
    STORAGE_KEY,
    FormPrefillStore,
    StoryStore,
)

BASE_TIME = datetime(2026, 10, 1, 19, 30, tzinfo=timezone.utc)

REQUEST = StoryRequest(child_name="Mia", age=4, interests=["dinosaurs"], moral="bravery", story_length=2)


def make_story(n: int = 0, **overrides) -> Story:
    story = Story.from_generation(
        REQUEST,
        GeneratedStory(title=f"Story {n}", content="Mia went on an adventure. She was brave."),
        story_id=f"story-{n}",
        created_at=BASE_TIME + timedelta(minutes=n),
    )
    return story.model_copy(update=overrides)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    return StoryStore(storage)


def test_from_generation_derives_metadata():
    story = Story.from_generation(REQUEST, GeneratedStory(title="T", content="one two  three\n\nfour"))
    assert story.word_count == 4
    assert story.child_name == "Mia"
    assert story.story_length == 2
    assert story.created_at.tzinfo is not None
    assert story.id
    assert story.audio_url is None


def test_empty_store(store):
    assert store.list() == []
    assert store.get_by_id("missing") is None


def test_save_then_get_returns_equal_story(store):
    story = make_story(1)
    store.save(story)
    assert store.get_by_id("story-1") == story


def test_saved_json_uses_camel_case(store, storage):
    store.save(make_story(1))
    record = json.loads(storage.get(STORAGE_KEY))[0]
    assert record["childName"] == "Mia"
    assert record["storyLength"] == 2
    assert record["wordCount"] == 8
    assert "createdAt" in record


def test_list_is_newest_first(store):
    for n in (3, 1, 2):
        store.save(make_story(n))
    assert [s.id for s in store.list()] == ["story-3", "story-2", "story-1"]


def test_save_replaces_existing_id(store):
    store.save(make_story(1))
    store.save(make_story(1, title="Renamed"))
    stories = store.list()
    assert len(stories) == 1
    assert stories[0].title == "Renamed"


def test_store_is_capped(store):
    for n in range(MAX_STORIES + 10):
        store.save(make_story(n))
        assert len(store.list()) <= MAX_STORIES

    stories = store.list()
    assert len(stories) == MAX_STORIES
    assert stories[0].id == f"story-{MAX_STORIES + 9}"
    assert store.get_by_id("story-0") is None
    assert store.get_by_id("story-9") is None
    assert store.get_by_id("story-10") is not None


def test_custom_cap(storage):
    store = StoryStore(storage, max_stories=3)
    for n in range(5):
        store.save(make_story(n))
    assert [s.id for s in store.list()] == ["story-4", "story-3", "story-2"]


def test_update_merges_fields(store):
    store.save(make_story(1))
    updated = store.update("story-1", title="New title")
    assert updated is not None
    assert updated.title == "New title"
    assert updated.content == make_story(1).content
    assert store.get_by_id("story-1") == updated


def test_attach_audio(store):
    store.save(make_story(1))
    updated = store.attach_audio("story-1", "blob:audio/1", 42)
    assert updated.audio_url == "blob:audio/1"
    assert updated.audio_duration == 42
    assert store.get_by_id("story-1").audio_duration == 42


def test_update_missing_story(store):
    assert store.update("nope", title="x") is None


def test_update_cannot_change_id(store):
    store.save(make_story(1))
    with pytest.raises(ValidationFailure):
        store.update("story-1", id="story-2")


def test_update_rejects_invalid_values(store):
    store.save(make_story(1))
    with pytest.raises(ValidationFailure):
        store.update("story-1", audio_duration=-5)


def test_delete(store):
    store.save(make_story(1))
    store.save(make_story(2))
    assert store.delete("story-1") is True
    assert store.get_by_id("story-1") is None
    assert store.delete("story-1") is False
    assert [s.id for s in store.list()] == ["story-2"]


def test_clear(store, storage):
    store.save(make_story(1))
    store.clear()
    assert store.list() == []
    assert storage.get(STORAGE_KEY) is None


@pytest.mark.parametrize("raw", ["not json", '{"id": 1}', '[{"id": "x"}]', "[1, 2, 3]"])
def test_corrupt_data_reads_as_empty(storage, store, raw):
    storage.set(STORAGE_KEY, raw)
    assert store.list() == []


def test_read_errors_read_as_empty():
    storage = MagicMock()
    storage.get.side_effect = OSError("disk gone")
    assert StoryStore(storage).list() == []


def test_write_failures_raise_persistence_failure():
    store = StoryStore(InMemoryStorage(quota_chars=100))
    with pytest.raises(PersistenceFailure):
        store.save(make_story(1))
    assert store.list() == []


def test_delete_write_failure_is_raised():
    storage = MagicMock()
    storage.get.return_value = json.dumps([make_story(1).model_dump(mode="json", by_alias=True)])
    storage.set.side_effect = OSError("read-only")
    with pytest.raises(PersistenceFailure):
        StoryStore(storage).delete("story-1")


def test_is_available():
    assert StoryStore(InMemoryStorage()).is_available()
    assert not StoryStore(InMemoryStorage(quota_chars=1)).is_available()


def test_naive_timestamps_are_treated_as_utc(storage, store):
    record = make_story(1).model_dump(mode="json", by_alias=True)
    record["createdAt"] = "2026-10-01T19:30:00"
    storage.set(STORAGE_KEY, json.dumps([record]))
    store.save(make_story(5))
    assert [s.id for s in store.list()] == ["story-5", "story-1"]


class TestJsonFileStorage:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        store = StoryStore(JsonFileStorage(path))
        store.save(make_story(1))

        reopened = StoryStore(JsonFileStorage(path))
        assert reopened.get_by_id("story-1") == make_story(1)
        assert list(tmp_path.joinpath("nested").iterdir()) == [path]

    def test_remove(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "storage.json")
        storage.set("a", "1")
        storage.set("b", "2")
        storage.remove("a")
        storage.remove("missing")
        assert storage.get("a") is None
        assert storage.get("b") == "2"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{oops", encoding="utf-8")
        assert StoryStore(JsonFileStorage(path)).list() == []


class TestInMemoryStorage:
    def test_quota(self):
        storage = InMemoryStorage(quota_chars=10)
        storage.set("k", "12345")
        storage.set("k", "123456789")
        with pytest.raises(StorageQuotaExceeded):
            storage.set("other", "x")


class TestFormPrefillStore:
    def test_round_trip(self, storage):
        prefill = FormPrefillStore(storage)
        prefill.save(REQUEST)
        loaded = prefill.load()
        assert loaded.child_name == "Mia"
        assert loaded.interests == ["dinosaurs"]
        assert loaded.story_length == 2

    def test_nothing_saved(self, storage):
        assert FormPrefillStore(storage).load() is None

    @pytest.mark.parametrize("length", [5, "4", 0.5])
    def test_invalid_story_length_defaults_to_two(self, storage, length):
        storage.set(LAST_FORM_DATA_KEY, json.dumps({"childName": "Leo", "storyLength": length}))
        loaded = FormPrefillStore(storage).load()
        assert loaded.child_name == "Leo"
        assert loaded.story_length == 2

    def test_valid_story_length_is_kept(self, storage):
        storage.set(LAST_FORM_DATA_KEY, json.dumps({"storyLength": 7}))
        assert FormPrefillStore(storage).load().story_length == 7

    def test_corrupt_data_is_ignored(self, storage):
        storage.set(LAST_FORM_DATA_KEY, "{broken")
        assert FormPrefillStore(storage).load() is None

    def test_save_failure(self):
        with pytest.raises(PersistenceFailure):
            FormPrefillStore(InMemoryStorage(quota_chars=5)).save(REQUEST)
