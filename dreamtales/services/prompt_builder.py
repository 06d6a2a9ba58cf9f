import math
from typing import NamedTuple

from ..models.story import StoryRequest

WORDS_PER_MINUTE = 150


class WordRange(NamedTuple):
    min: int
    max: int


def word_count_range(minutes: int) -> WordRange:
    words = minutes * WORDS_PER_MINUTE
    return WordRange(min=math.floor(words * 0.8), max=math.ceil(words * 1.2))


def vocabulary_guidance(age: int) -> str:
    if age <= 3:
        return (
            "Use VERY simple words only. Short sentences of 5-8 words max. Lots of repetition. "
            "Focus on sounds, colors, and simple actions. Words a toddler knows."
        )
    if age <= 5:
        return (
            "Use simple everyday words a 5 year old knows. Keep sentences short and easy. "
            "No complex words. Simple descriptions like 'big', 'small', 'happy', 'soft'."
        )
    if age <= 8:
        return (
            "Use simple vocabulary that a child can understand easily. Avoid fancy or difficult words. "
            "Keep sentences clear and not too long."
        )
    return (
        "Use clear, easy to understand language. Some descriptive words are okay "
        "but keep it simple and engaging for a child."
    )


def build_story_prompt(request: StoryRequest) -> str:
    word_range = word_count_range(request.story_length)
    interests = ", ".join(request.interests)
    name = request.child_name

    return f"""
You are a kind storyteller telling a bedtime story to a young child. Create a simple, sweet, and calming bedtime story.

Story Details:
- Hero's name: {name}
- Age: {request.age} years old
- Things they love: {interests}
- Lesson to learn: {request.moral}
- Length: {word_range.min}-{word_range.max} words

IMPORTANT Writing Rules:
- {vocabulary_guidance(request.age)}
- Use SIMPLE words that children use every day
- Keep sentences SHORT and EASY to follow
- NO asterisks (*) or special symbols anywhere in the story
- NO bullet points or formatting marks
- Write numbers as words (say "three" not "3")
- Add natural pauses with commas and periods
- Use "..." for gentle pauses in speech (like "and then... he saw something amazing")
- Make {name} the brave and kind hero
- Include what they love in the story
- End with something peaceful and sleepy

How to Format:
TITLE: [A simple, fun title]

STORY:
[Write the story here in plain text with short paragraphs. No special formatting.]

Remember: This will be read out loud by a computer voice. Write it so it sounds natural when spoken slowly to a sleepy child. End with the character feeling safe, warm, and ready to sleep.
""".strip()
