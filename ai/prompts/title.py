"""Chat title prompt builder and reply cleanup."""
from __future__ import annotations

MAX_TITLE_WORDS = 6
MAX_TITLE_CHARS = 80


def build_title_instruction() -> str:
    return (
        "Summarize the conversation into a short, human-readable chat title, "
        f"max {MAX_TITLE_WORDS} words.\n"
        "Return ONLY the title on a single line. No quotes, no punctuation, no emojis."
    )


def clean_title(raw: str, fallback: str) -> str:
    """Squash a model reply into a single short line, or ``fallback`` if blank."""
    cleaned = raw.replace("\n", " ").strip()
    cleaned = cleaned.strip(" \"'`")
    limited = " ".join(cleaned.split()[:MAX_TITLE_WORDS])
    return limited[:MAX_TITLE_CHARS].strip() or fallback
