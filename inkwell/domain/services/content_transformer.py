"""
Content transformations: excerpt and reading time.

Both functions are pure and never raise on malformed input; they degrade
to an empty excerpt and a one-minute reading time.
"""

import math
import re

EXCERPT_LENGTH = 150
EXCERPT_CUT = 147
ELLIPSIS = "..."
WORDS_PER_MINUTE = 200

_MARKDOWN_RULES = (
    (re.compile(r"#{1,6}\s"), ""),                   # headings
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),           # bold
    (re.compile(r"__(.*?)__"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),               # italic
    (re.compile(r"(?<!\w)_(.*?)_(?!\w)"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),                 # inline code
    (re.compile(r"!?\[(.*?)\]\(.*?\)"), r"\1"),      # links keep their text
    (re.compile(r"<[^>]*>"), ""),                    # html tags
)


def to_plain_text(content: str) -> str:
    """Strip markdown/HTML markers and collapse newlines."""
    if not isinstance(content, str):
        return ""
    text = content
    for pattern, replacement in _MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    text = re.sub(r"\r?\n", " ", text)
    return text.strip()


def derive_excerpt(content: str) -> str:
    """
    Short plain-text summary of the content.

    Plain text up to 150 chars is returned as-is; longer text is cut at 147
    chars and followed by an ellipsis.
    """
    text = to_plain_text(content)
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[:EXCERPT_CUT].rstrip() + ELLIPSIS


def estimate_reading_time(content: str) -> int:
    """Minutes to read at 200 words per minute, rounded up, at least 1."""
    if not isinstance(content, str) or not content.strip():
        return 1
    words = len(content.split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))
