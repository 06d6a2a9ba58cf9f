import re

_ELLIPSIS = re.compile(r"\.{3,}")
_QUOTES = re.compile(r"[\"'“”‘’]")
_WHITESPACE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([.,!?])")


def sanitize_for_speech(text: str) -> str:
    """Strip symbols a TTS voice would read aloud ("asterisk", "hash") and tidy spacing.

    Idempotent: sanitize_for_speech(sanitize_for_speech(x)) == sanitize_for_speech(x).
    """
    text = text.replace("*", "")
    text = text.replace("_", " ")
    text = text.replace("#", "")
    text = re.sub(r"[\[\]{}]", "", text)
    text = _ELLIPSIS.sub("...", text)
    # Dashes become a spoken pause
    text = text.replace("—", ", ").replace("–", ", ")
    text = _QUOTES.sub("", text)
    text = text.replace("&", " and ")
    text = text.replace("@", " at ")
    text = _WHITESPACE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    # ". . . ." only becomes a run of periods once the spaces are gone
    text = _ELLIPSIS.sub("...", text)
    return text.strip()
