"""
Tests for YouTube Service

Tests the metadata fallback chain:
- Data API with captions
- Caption failures are swallowed
- oEmbed fallback
- Placeholder when everything fails
"""
import httpx
import pytest
import respx

from app.services.youtube_service import YouTubeService

API_HOST = "www.googleapis.com"
VIDEO_ID = "dQw4w9WgXcQ"

VIDEOS_RESPONSE = {
    "items": [{
        "id": VIDEO_ID,
        "snippet": {
            "title": "Photosynthesis Explained",
            "description": "Plants turn light into sugar.",
            "channelTitle": "Science Hub",
            "publishedAt": "2023-05-01T12:00:00Z"
        },
        "statistics": {"viewCount": "98765"},
        "contentDetails": {"duration": "PT1H2M3S"}
    }]
}

CAPTIONS_LIST = {
    "items": [
        {"id": "track-fr", "snippet": {"language": "fr"}},
        {"id": "track-en", "snippet": {"language": "en"}}
    ]
}

CAPTION_SRT = "1\n00:00:00,000 --> 00:00:02,000\nLight &amp; water go in.\n\n2\n00:00:02,000 --> 00:00:04,000\nSugar comes out.\n"

OEMBED_RESPONSE = {"title": "Photosynthesis Explained", "author_name": "Science Hub"}


class TestYouTubeService:
    """Test cases for YouTubeService.resolve"""

    @pytest.mark.asyncio
    async def test_data_api_with_captions(self):
        """Full metadata and English captions when the API key works"""
        service = YouTubeService(api_key="yt-key", timeout=2.0)

        with respx.mock(assert_all_called=True) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(200, json=VIDEOS_RESPONSE)
            )
            mock.get(host=API_HOST, path="/youtube/v3/captions").mock(
                return_value=httpx.Response(200, json=CAPTIONS_LIST)
            )
            download = mock.get(host=API_HOST, path="/youtube/v3/captions/track-en").mock(
                return_value=httpx.Response(200, text=CAPTION_SRT)
            )

            details = await service.resolve(VIDEO_ID)

        assert details.title == "Photosynthesis Explained"
        assert details.channel_title == "Science Hub"
        assert details.duration == "1:02:03"
        assert details.view_count == "98765"
        assert details.captions == "Light & water go in. Sugar comes out."
        assert download.calls.last.request.url.params["tfmt"] == "srt"

    @pytest.mark.asyncio
    async def test_caption_failure_is_swallowed(self):
        """Caption errors leave captions empty but keep the metadata"""
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=False) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(200, json=VIDEOS_RESPONSE)
            )
            mock.get(host=API_HOST, path="/youtube/v3/captions").mock(
                return_value=httpx.Response(403, json={"error": {"code": 403}})
            )

            details = await service.resolve(VIDEO_ID)

        assert details.title == "Photosynthesis Explained"
        assert details.duration == "1:02:03"
        assert details.captions == ""

    @pytest.mark.asyncio
    async def test_no_caption_tracks(self):
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=False) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(200, json=VIDEOS_RESPONSE)
            )
            mock.get(host=API_HOST, path="/youtube/v3/captions").mock(
                return_value=httpx.Response(200, json={"items": []})
            )

            details = await service.resolve(VIDEO_ID)

        assert details.captions == ""

    @pytest.mark.asyncio
    async def test_malformed_caption_track_is_swallowed(self):
        """A caption track with a null snippet is still downloaded"""
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=False) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(200, json=VIDEOS_RESPONSE)
            )
            mock.get(host=API_HOST, path="/youtube/v3/captions").mock(
                return_value=httpx.Response(200, json={"items": [{"id": "c1", "snippet": None}]})
            )
            mock.get(host=API_HOST, path="/youtube/v3/captions/c1").mock(
                return_value=httpx.Response(200, text=CAPTION_SRT)
            )

            details = await service.resolve(VIDEO_ID)

        assert details.title == "Photosynthesis Explained"
        assert details.captions == "Light & water go in. Sugar comes out."

    @pytest.mark.asyncio
    async def test_unexpected_caption_payload_is_swallowed(self):
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=False) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(200, json=VIDEOS_RESPONSE)
            )
            mock.get(host=API_HOST, path="/youtube/v3/captions").mock(
                return_value=httpx.Response(200, json={"items": [None]})
            )

            details = await service.resolve(VIDEO_ID)

        assert details.title == "Photosynthesis Explained"
        assert details.captions == ""

    @pytest.mark.asyncio
    async def test_null_video_snippet_falls_back_to_oembed(self):
        """A video item without a usable snippet goes to the next source"""
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=False) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(200, json={"items": [{"snippet": None}]})
            )
            mock.get(host=API_HOST, path="/youtube/v3/captions").mock(
                return_value=httpx.Response(200, json={"items": []})
            )
            mock.get(host="www.youtube.com", path="/oembed").mock(
                return_value=httpx.Response(200, json=OEMBED_RESPONSE)
            )

            details = await service.resolve(VIDEO_ID)

        assert details.title == "Photosynthesis Explained"
        assert details.duration == "Unknown"

    @pytest.mark.asyncio
    async def test_malformed_oembed_gives_placeholder(self):
        service = YouTubeService(api_key=None)

        with respx.mock(assert_all_called=True) as mock:
            mock.get(host="www.youtube.com", path="/oembed").mock(
                return_value=httpx.Response(200, json=["not", "an", "object"])
            )

            details = await service.resolve(VIDEO_ID)

        assert VIDEO_ID in details.title

    @pytest.mark.asyncio
    async def test_oembed_fallback_when_data_api_fails(self):
        """Primary API failure + working oEmbed gives title, Unknown duration, no captions"""
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=True) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(500)
            )
            mock.get(host="www.youtube.com", path="/oembed").mock(
                return_value=httpx.Response(200, json=OEMBED_RESPONSE)
            )

            details = await service.resolve(VIDEO_ID)

        assert details.title == "Photosynthesis Explained"
        assert details.channel_title == "Science Hub"
        assert details.duration == "Unknown"
        assert details.captions == ""

    @pytest.mark.asyncio
    async def test_oembed_used_directly_without_api_key(self):
        service = YouTubeService(api_key=None)

        with respx.mock(assert_all_called=True) as mock:
            oembed = mock.get(host="www.youtube.com", path="/oembed").mock(
                return_value=httpx.Response(200, json={"title": "Only Title"})
            )

            details = await service.resolve(VIDEO_ID)

        assert details.title == "Only Title"
        assert details.channel_title == "Unknown Channel"
        assert details.duration == "Unknown"
        assert VIDEO_ID in oembed.calls.last.request.url.params["url"]

    @pytest.mark.asyncio
    async def test_data_api_without_items_falls_back(self):
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=True) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                return_value=httpx.Response(200, json={"items": []})
            )
            mock.get(host="www.youtube.com", path="/oembed").mock(
                return_value=httpx.Response(200, json=OEMBED_RESPONSE)
            )

            details = await service.resolve(VIDEO_ID)

        assert details.duration == "Unknown"

    @pytest.mark.asyncio
    async def test_placeholder_when_everything_fails(self):
        """Both sources failing still returns a record naming the video ID"""
        service = YouTubeService(api_key="yt-key")

        with respx.mock(assert_all_called=True) as mock:
            mock.get(host=API_HOST, path="/youtube/v3/videos").mock(
                side_effect=httpx.ConnectError("connection refused")
            )
            mock.get(host="www.youtube.com", path="/oembed").mock(
                side_effect=httpx.ReadTimeout("timed out")
            )

            details = await service.resolve(VIDEO_ID)

        assert VIDEO_ID in details.title
        assert details.duration == "Unknown"
        assert details.captions == ""

    @pytest.mark.asyncio
    async def test_uses_injected_client(self):
        """An injected client is used and left open"""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"title": "Injected", "author_name": "Chan"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        service = YouTubeService(api_key=None, http_client=client)

        details = await service.resolve(VIDEO_ID)

        assert details.title == "Injected"
        assert not client.is_closed
        await client.aclose()
