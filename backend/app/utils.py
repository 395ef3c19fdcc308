"""
Small helpers for YouTube URLs, durations and file sizes
"""
import re
from typing import Optional

VIDEO_ID_PATTERN = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/shorts/)([^&\n?#/\s]+)"
)

ISO8601_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)

FILE_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def extract_video_id(url: str) -> Optional[str]:
    """Return the video ID from a watch, youtu.be, embed or shorts URL, or None"""
    if not url:
        return None
    match = VIDEO_ID_PATTERN.search(url.strip())
    return match.group(1) if match else None


def get_video_thumbnail(video_id: str) -> str:
    """High quality thumbnail URL for a video"""
    return f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg"


def format_iso8601_duration(value: str) -> str:
    """
    Render a YouTube ISO-8601 duration (e.g. PT1H2M3S) as 1:02:03.

    Values that do not parse are returned unchanged.
    """
    match = ISO8601_DURATION_PATTERN.match(value or "")
    if not match or value == "P":
        return value

    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    hours = parts["days"] * 24 + parts["hours"]
    minutes = parts["minutes"]
    seconds = parts["seconds"]

    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_file_size(size: int) -> str:
    """Human readable file size, e.g. 1536 -> '1.5 KB'"""
    if size <= 0:
        return "0 Bytes"
    index = 0
    value = float(size)
    while value >= 1024 and index < len(FILE_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {FILE_SIZE_UNITS[index]}"
