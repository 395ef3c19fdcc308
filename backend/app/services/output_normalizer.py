"""
Output Normalizer

Cleans model-generated text before it reaches users:
- Removes markdown decoration and invisible characters
- Collapses whitespace
- Enforces a hard word cap for explanation modes

Word counting splits on whitespace, so scripts written without spaces
between words (Chinese, Japanese, Thai) count a whole run as one word.
"""
import re
from typing import Optional

ELLIPSIS = "..."

INVISIBLE_CHARS = re.compile("[\u00ad\u180e\u200b-\u200f\u202a-\u202e\u2060-\u2064\ufeff]")
INLINE_MARKDOWN = re.compile(r"[*_`]")
# Heading, blockquote and bullet markers at the start of a line, possibly stacked ("> - item")
LINE_MARKERS = re.compile(r"^[ \t]*(?:(?:#+|>+)[ \t]*|[-+•](?:[ \t]+|$))+")
# Any whitespace except newlines, including Unicode spaces
HORIZONTAL_WHITESPACE = re.compile(r"[^\S\n]+")
EXCESS_NEWLINES = re.compile(r"\n{3,}")
TRAILING_PUNCTUATION = ".,;:!?"


def count_words(text: str) -> int:
    """Number of whitespace-delimited words"""
    return len(text.split())


def _clean(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = INVISIBLE_CHARS.sub("", text)
    text = INLINE_MARKDOWN.sub("", text)

    lines = []
    for line in text.split("\n"):
        line = HORIZONTAL_WHITESPACE.sub(" ", line)
        line = LINE_MARKERS.sub("", line).strip()
        lines.append(line)

    text = "\n".join(lines)
    text = EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def normalize_output(raw_text: Optional[str], word_cap: Optional[int] = None) -> str:
    """
    Clean generated text and optionally cap its length.

    Args:
        raw_text: Text as returned by the model
        word_cap: Maximum number of words, or None for no cap

    Returns:
        Cleaned text. When capped and too long, exactly ``word_cap`` words
        joined by single spaces, with "..." attached to the last word.

    Raises:
        ValueError: word_cap is given but smaller than 1
    """
    if word_cap is not None and word_cap < 1:
        raise ValueError(f"word_cap must be at least 1, got {word_cap}")

    if not raw_text:
        return ""

    text = _clean(raw_text)

    if word_cap is None:
        return text

    words = text.split()
    if len(words) <= word_cap:
        return text

    kept = words[:word_cap]
    last = kept[-1].rstrip(TRAILING_PUNCTUATION) or kept[-1]
    kept[-1] = last + ELLIPSIS
    return " ".join(kept)
