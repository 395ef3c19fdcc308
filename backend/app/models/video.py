"""
Video Models
"""
from pydantic import BaseModel, ConfigDict


class VideoDetails(BaseModel):
    """Best-effort metadata for a single YouTube video.

    Built once per summarization request by the YouTube service and never
    mutated afterwards. ``captions`` is the flattened plain-text transcript,
    or an empty string when no captions could be fetched.
    """
    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    duration: str = "Unknown"
    channel_title: str = "Unknown Channel"
    published_at: str = ""
    view_count: str = ""
    captions: str = ""


class SummaryResult(BaseModel):
    """Output of the summary pipeline, before it is stored"""
    video_id: str
    title: str
    video_duration: str
    summary_text: str
    channel_title: str = ""
    thumbnail_url: str = ""
