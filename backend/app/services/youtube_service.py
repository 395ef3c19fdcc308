"""
YouTube Service

Resolves video metadata for the summary pipeline through a chain of
progressively weaker sources:

1. YouTube Data API v3 (needs an API key) - full metadata plus a
   best-effort caption download
2. Public oEmbed endpoint (no key) - title and channel only
3. Placeholder built from the video ID

resolve() never raises; the worst case is a placeholder record.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.models.video import VideoDetails
from app.settings import get_settings
from app.utils import format_iso8601_duration
from .transcript_service import parse_srt_to_text, select_caption_track

logger = logging.getLogger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
OEMBED_URL = "https://www.youtube.com/oembed"

UNKNOWN_DURATION = "Unknown"
UNKNOWN_CHANNEL = "Unknown Channel"

# Network failures plus malformed or unexpected payloads
RESOLVE_ERRORS = (httpx.HTTPError, KeyError, IndexError, ValueError, TypeError, AttributeError)


class CaptionsUnavailable(Exception):
    """Raised internally when a video has no downloadable captions"""


class YouTubeService:
    """Service for resolving YouTube video details"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            api_key: YouTube Data API key. Without it only oEmbed is used
                and captions are skipped.
            timeout: Per-request timeout in seconds
            http_client: Optional shared client (mainly for tests)
        """
        self.api_key = api_key
        self.timeout = timeout
        self._http_client = http_client

        if not self.api_key:
            logger.warning("YouTube API key not configured - using oEmbed metadata only, no captions")

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self.timeout)

    async def _get(self, client: httpx.AsyncClient, url: str, params: Dict[str, Any]) -> httpx.Response:
        response = await client.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response

    async def resolve(self, video_id: str) -> VideoDetails:
        """
        Get the best available details for a video.

        Args:
            video_id: YouTube video ID (already extracted from the URL)

        Returns:
            VideoDetails; never raises
        """
        client = self._client()
        try:
            if self.api_key:
                try:
                    details = await self._fetch_from_data_api(client, video_id)
                    if details:
                        return details
                except RESOLVE_ERRORS as e:
                    logger.warning(f"YouTube Data API failed for {video_id}, trying oEmbed: {e}")

            try:
                return await self._fetch_from_oembed(client, video_id)
            except RESOLVE_ERRORS as e:
                logger.warning(f"oEmbed failed for {video_id}, using placeholder: {e}")

            return self._placeholder(video_id)
        finally:
            if client is not self._http_client:
                await client.aclose()

    async def _fetch_from_data_api(self, client: httpx.AsyncClient, video_id: str) -> Optional[VideoDetails]:
        """Full metadata from the Data API, or None if the video is not found"""
        response = await self._get(
            client,
            f"{YOUTUBE_API_BASE}/videos",
            {"id": video_id, "key": self.api_key, "part": "snippet,statistics,contentDetails"}
        )
        items = response.json().get("items") or []
        if not items:
            logger.warning(f"YouTube Data API returned no items for {video_id}")
            return None

        video = items[0]
        snippet = video.get("snippet") or {}
        statistics = video.get("statistics") or {}
        content_details = video.get("contentDetails") or {}
        title = snippet["title"]

        # Captions are an enhancement; any failure leaves them empty
        captions = ""
        try:
            captions = await self._fetch_captions(client, video_id)
        except (CaptionsUnavailable,) + RESOLVE_ERRORS as e:
            logger.info(f"Could not fetch captions for {video_id}: {e}")

        return VideoDetails(
            title=title,
            description=snippet.get("description") or "",
            duration=format_iso8601_duration(content_details.get("duration") or UNKNOWN_DURATION),
            channel_title=snippet.get("channelTitle") or UNKNOWN_CHANNEL,
            published_at=snippet.get("publishedAt") or "",
            view_count=str(statistics.get("viewCount") or ""),
            captions=captions
        )

    async def _fetch_captions(self, client: httpx.AsyncClient, video_id: str) -> str:
        """Download the preferred caption track as SRT and flatten it"""
        response = await self._get(
            client,
            f"{YOUTUBE_API_BASE}/captions",
            {"videoId": video_id, "key": self.api_key, "part": "snippet"}
        )
        track = select_caption_track(response.json().get("items") or [])
        if not track:
            raise CaptionsUnavailable("No captions available")

        download = await self._get(
            client,
            f"{YOUTUBE_API_BASE}/captions/{track['id']}",
            {"key": self.api_key, "tfmt": "srt"}
        )
        transcript = parse_srt_to_text(download.text)
        logger.info(f"Fetched captions for {video_id} ({len(transcript)} chars)")
        return transcript

    async def _fetch_from_oembed(self, client: httpx.AsyncClient, video_id: str) -> VideoDetails:
        """Title and channel from the public oEmbed endpoint"""
        response = await self._get(
            client,
            OEMBED_URL,
            {"url": f"https://www.youtube.com/watch?v={video_id}", "format": "json"}
        )
        data = response.json()
        return VideoDetails(
            title=data["title"],
            duration=UNKNOWN_DURATION,
            channel_title=data.get("author_name") or UNKNOWN_CHANNEL
        )

    def _placeholder(self, video_id: str) -> VideoDetails:
        """Minimal record so the pipeline can still produce output"""
        return VideoDetails(
            title=f"YouTube Video {video_id}",
            duration=UNKNOWN_DURATION,
            channel_title=UNKNOWN_CHANNEL
        )


# Singleton instance
_youtube_service: Optional[YouTubeService] = None


def get_youtube_service() -> YouTubeService:
    """Get or create YouTube service singleton"""
    global _youtube_service
    if _youtube_service is None:
        settings = get_settings()
        _youtube_service = YouTubeService(
            api_key=settings.youtube_api_key,
            timeout=settings.youtube_timeout_seconds
        )
    return _youtube_service
