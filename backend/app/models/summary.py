"""
Summary, Bookmark and Stats Models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime


class SummaryCreate(BaseModel):
    """Schema for creating a summary from a YouTube URL"""
    video_url: str = Field(..., min_length=1, max_length=500)


class SummaryResponse(BaseModel):
    """Schema for summary data returned from API"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    video_url: str
    video_id: str
    video_duration: str
    channel_title: str = ""
    thumbnail_url: str = ""
    summary: str
    is_bookmarked: bool = False
    created_at: datetime
    updated_at: datetime


class BookmarkCreate(BaseModel):
    """Schema for bookmarking a summary"""
    summary_id: str


class BookmarkResponse(BaseModel):
    """Schema for a created bookmark"""
    summary_id: str
    created_at: datetime


class DailyActivity(BaseModel):
    """Number of summaries created on a given day"""
    date: str
    summaries: int


class StatsResponse(BaseModel):
    """Per-user library statistics"""
    total_summaries: int
    total_bookmarks: int
    daily_activity: List[DailyActivity] = []


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str
