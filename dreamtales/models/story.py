from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

StoryLength = Literal[2, 4, 7]
STORY_LENGTHS: tuple[int, ...] = (2, 4, 7)
DEFAULT_STORY_LENGTH: StoryLength = 2


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoryRequest(CamelModel):
    child_name: str = Field(..., min_length=1, max_length=50, description="The hero of the story.")
    age: int = Field(..., ge=1, le=12)
    interests: list[str] = Field(..., min_length=1, max_length=5)
    moral: str = Field(..., min_length=1, description="Lesson the story should teach.")
    story_length: StoryLength = Field(..., description="Target narration length in minutes.")


class GeneratedStory(BaseModel):
    title: str
    content: str


class GenerateStoryResponse(BaseModel):
    success: bool
    story: Optional[GeneratedStory] = None
    error: Optional[str] = None


class Story(CamelModel):
    id: str
    title: str
    content: str
    child_name: str
    age: int
    interests: list[str]
    moral: str
    story_length: StoryLength
    created_at: datetime
    word_count: int = Field(ge=0)
    audio_url: Optional[str] = None
    audio_duration: Optional[float] = Field(default=None, ge=0)

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    @classmethod
    def from_generation(
        cls,
        request: StoryRequest,
        generated: GeneratedStory,
        *,
        story_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> "Story":
        return cls(
            id=story_id or str(uuid.uuid4()),
            title=generated.title,
            content=generated.content,
            child_name=request.child_name,
            age=request.age,
            interests=list(request.interests),
            moral=request.moral,
            story_length=request.story_length,
            created_at=created_at or datetime.now(timezone.utc),
            word_count=count_words(generated.content),
        )


class FormPrefill(CamelModel):
    """Last-used form values, used to prefill the next request."""

    child_name: Optional[str] = None
    age: Optional[int] = None
    interests: Optional[list[str]] = None
    moral: Optional[str] = None
    story_length: Optional[StoryLength] = None


class SuggestInterestsRequest(CamelModel):
    age: int = Field(..., ge=1, le=12)
    current_interests: list[str] = Field(default_factory=list)


class SuggestInterestsResponse(BaseModel):
    success: bool
    suggestions: list[str] = Field(default_factory=list)
    error: Optional[str] = None


def count_words(text: str) -> int:
    return len(text.split())
