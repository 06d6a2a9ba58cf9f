from pydantic import BaseModel

from .narration import VOICE_OPTIONS


class Option(BaseModel):
    value: str
    label: str
    emoji: str | None = None


class StoryLengthOption(BaseModel):
    value: int
    label: str
    description: str


class OptionsResponse(BaseModel):
    interests: list[Option]
    morals: list[Option]
    story_lengths: list[StoryLengthOption]
    voices: dict[str, str]


INTEREST_OPTIONS = [
    Option(value="dinosaurs", label="Dinosaurs", emoji="🦕"),
    Option(value="space", label="Space & Stars", emoji="🚀"),
    Option(value="animals", label="Animals", emoji="🐾"),
    Option(value="princesses", label="Princesses & Princes", emoji="👑"),
    Option(value="superheroes", label="Superheroes", emoji="🦸"),
    Option(value="pirates", label="Pirates", emoji="🏴‍☠️"),
    Option(value="fairies", label="Fairies & Magic", emoji="🧚"),
    Option(value="cars", label="Cars & Trucks", emoji="🚗"),
    Option(value="underwater", label="Underwater World", emoji="🐠"),
    Option(value="cooking", label="Cooking & Food", emoji="🍳"),
    Option(value="sports", label="Sports", emoji="⚽"),
    Option(value="robots", label="Robots", emoji="🤖"),
    Option(value="nature", label="Nature & Gardens", emoji="🌸"),
    Option(value="music", label="Music", emoji="🎵"),
    Option(value="dragons", label="Dragons", emoji="🐉"),
]

MORAL_OPTIONS = [
    Option(value="kindness", label="Being Kind to Others"),
    Option(value="bravery", label="Being Brave"),
    Option(value="honesty", label="Telling the Truth"),
    Option(value="friendship", label="The Value of Friendship"),
    Option(value="sharing", label="Sharing with Others"),
    Option(value="perseverance", label="Never Giving Up"),
    Option(value="gratitude", label="Being Grateful"),
    Option(value="creativity", label="Using Your Imagination"),
    Option(value="respect", label="Respecting Others"),
    Option(value="patience", label="Being Patient"),
    Option(value="helping", label="Helping Those in Need"),
    Option(value="self-belief", label="Believing in Yourself"),
]

STORY_LENGTH_OPTIONS = [
    StoryLengthOption(value=2, label="2 minutes", description="Short & sweet (~300 words)"),
    StoryLengthOption(value=4, label="4 minutes", description="Just right (~600 words)"),
    StoryLengthOption(value=7, label="7 minutes", description="Extended adventure (~1000 words)"),
]


def all_options() -> OptionsResponse:
    return OptionsResponse(
        interests=INTEREST_OPTIONS,
        morals=MORAL_OPTIONS,
        story_lengths=STORY_LENGTH_OPTIONS,
        voices=VOICE_OPTIONS,
    )
