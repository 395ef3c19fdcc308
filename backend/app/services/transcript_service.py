"""
Transcript Service

Turns timed caption payloads into plain-text transcripts:
- Picks the caption track to download (English first, else the first track)
- Flattens SRT subtitles into a single line of text, dropping sequence
  numbers, timestamps, inline markup and formatting-only lines
"""
import html
import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = re.compile(r"\n\s*\n")
SEQUENCE_LINE = re.compile(r"^\d+$")
TAG_PATTERN = re.compile(r"<[^>]*>")
# SSA-style positioning overrides such as {\an8}
OVERRIDE_PATTERN = re.compile(r"\{\\[^}]*\}")
# Lines made only of music notes, dashes or brackets carry no speech
FORMATTING_ONLY_LINE = re.compile(r"^[\s\-_=~*#♪♫\[\]()]*$")

ENGLISH_CODES = ("en", "en-us", "en-gb")


def select_caption_track(tracks: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Choose which caption track to download.

    Args:
        tracks: Items from the YouTube captions.list response

    Returns:
        The English track if one exists, otherwise the first track, or None
        when there are no tracks at all.
    """
    if not tracks:
        return None

    for track in tracks:
        language = ((track.get("snippet") or {}).get("language") or "").lower()
        if language in ENGLISH_CODES or language.startswith("en-"):
            return track

    return tracks[0]


def _clean_line(line: str) -> str:
    """Strip markup from a single subtitle text line and decode entities"""
    text = TAG_PATTERN.sub("", line)
    text = OVERRIDE_PATTERN.sub("", text)
    text = html.unescape(text)
    return text.strip()


def parse_srt_to_text(srt_content: str) -> str:
    """
    Flatten an SRT caption file into plain text.

    Args:
        srt_content: Raw SRT payload

    Returns:
        Subtitle text lines joined by single spaces, in file order. Empty
        string when nothing speakable remains.
    """
    if not srt_content:
        return ""

    normalized = srt_content.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff")
    text_lines: List[str] = []

    for block in BLOCK_SEPARATOR.split(normalized.strip()):
        for raw_line in block.split("\n"):
            line = raw_line.strip()
            if not line or SEQUENCE_LINE.match(line) or "-->" in line:
                continue

            cleaned = _clean_line(line)
            if not cleaned or FORMATTING_ONLY_LINE.match(cleaned):
                continue

            text_lines.append(cleaned)

    transcript = " ".join(text_lines)
    logger.debug(f"Parsed SRT into {len(text_lines)} lines ({len(transcript)} chars)")
    return transcript
