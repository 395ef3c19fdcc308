"""
Summarization Service

Runs the two generation pipelines behind the summary and explain endpoints:

VIDEO SUMMARY:
1. Validate the URL and extract the video ID
2. Resolve video details (Data API -> oEmbed -> placeholder)
3. Compose the study summary prompt
4. Generate with retry/fallback
5. Normalize the output (markdown stripped, no word cap)

EXPLANATION:
1. Validate text, mode and style (unknown values are rejected)
2. Compose a length-budgeted prompt
3. Generate with retry/fallback
4. Normalize, enforcing the word cap for every mode except comprehensive

Invalid input raises InvalidRequestError before any network call.
"""
import logging
from typing import Optional, Union

from app.models.explanation import ExplainMode, ExplainStyle
from app.models.video import SummaryResult
from app.utils import extract_video_id, get_video_thumbnail
from .generation_service import GenerationClient, get_generation_client
from .output_normalizer import normalize_output
from .prompt_service import PromptKind, compose, word_budget
from .youtube_service import YouTubeService, get_youtube_service

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = "You are a study assistant that writes clear plain-text study notes."
EXPLANATION_SYSTEM_PROMPT = "You are a study assistant that explains text in plain language and respects length limits."


class InvalidRequestError(ValueError):
    """Caller input rejected before any external call"""


def _parse_enum(enum_cls, value, default, field_name: str):
    """Parse an optional enum value; unknown values are an error, never a default"""
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidRequestError(f"Invalid {field_name} '{value}'. Expected one of: {allowed}") from None


class SummarizationService:
    """Service for generating video summaries and text explanations"""

    def __init__(
        self,
        generation_client: Optional[GenerationClient] = None,
        youtube_service: Optional[YouTubeService] = None
    ):
        """Initialize the summarization service"""
        self.generation = generation_client or get_generation_client()
        self.youtube = youtube_service or get_youtube_service()
        logger.info("Summarization service initialized")

    async def create_summary(self, video_url: str) -> SummaryResult:
        """
        Generate a study summary for a YouTube video.

        Args:
            video_url: Watch, youtu.be, embed or shorts URL

        Returns:
            SummaryResult with title, duration and summary text

        Raises:
            InvalidRequestError: URL is empty or not a recognized YouTube URL
            GenerationFailed: The model could not produce a summary
        """
        if not video_url or not video_url.strip():
            raise InvalidRequestError("Video URL is required")

        video_id = extract_video_id(video_url)
        if not video_id:
            raise InvalidRequestError("Invalid YouTube URL")

        details = await self.youtube.resolve(video_id)
        logger.info(
            f"Resolved video {video_id}: '{details.title}' "
            f"(duration: {details.duration}, transcript: {len(details.captions)} chars)"
        )

        prompt = compose(PromptKind.SUMMARY, details=details, video_url=video_url.strip())
        raw = await self.generation.generate(prompt, system_prompt=SUMMARY_SYSTEM_PROMPT)
        summary_text = normalize_output(raw)

        return SummaryResult(
            video_id=video_id,
            title=details.title,
            video_duration=details.duration,
            summary_text=summary_text,
            channel_title=details.channel_title,
            thumbnail_url=get_video_thumbnail(video_id)
        )

    async def explain_text(
        self,
        text: str,
        mode: Optional[Union[ExplainMode, str]] = None,
        style: Optional[Union[ExplainStyle, str]] = None,
        duration: Optional[str] = None,
        coverage: Optional[str] = None
    ) -> str:
        """
        Explain a piece of text.

        Args:
            text: Text to explain (must not be blank)
            mode: short, medium, long or comprehensive (default medium)
            style: standard, teacher, expert or accessible (default standard)
            duration: Narration length hint, comprehensive mode only
            coverage: Coverage hint, comprehensive mode only

        Returns:
            Normalized explanation text

        Raises:
            InvalidRequestError: Blank text or unknown mode/style
            GenerationFailed: The model could not produce an explanation
        """
        if not text or not text.strip():
            raise InvalidRequestError("Text is required")

        explain_mode = _parse_enum(ExplainMode, mode, ExplainMode.MEDIUM, "mode")
        explain_style = _parse_enum(ExplainStyle, style, ExplainStyle.STANDARD, "style")

        is_comprehensive = explain_mode == ExplainMode.COMPREHENSIVE
        prompt = compose(
            PromptKind.EXPLANATION,
            text=text.strip(),
            mode=explain_mode,
            style=explain_style,
            duration_hint=duration if is_comprehensive else None,
            coverage_hint=coverage if is_comprehensive else None
        )

        raw = await self.generation.generate(prompt, system_prompt=EXPLANATION_SYSTEM_PROMPT)
        cap = word_budget(explain_mode, explain_style)
        explanation = normalize_output(raw, cap)

        logger.info(
            f"Explanation generated (mode: {explain_mode.value}, style: {explain_style.value}, "
            f"cap: {cap}, words: {len(explanation.split())})"
        )
        return explanation


# Singleton instance
_summarization_service: Optional[SummarizationService] = None


def get_summarization_service() -> SummarizationService:
    """Get or create summarization service singleton"""
    global _summarization_service
    if _summarization_service is None:
        _summarization_service = SummarizationService()
    return _summarization_service
