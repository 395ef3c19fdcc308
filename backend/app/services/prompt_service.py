"""
Prompt Service

Builds every prompt sent to the generation model:

1. Video summaries - study summary from video metadata and transcript
2. Explanations - length-budgeted explanations of pasted text, by mode and style
3. Chat turns - tutor framing, recent history, current message, attachment metadata
4. Chat titles - short title from the first message of a chat

All builders are pure functions of their inputs.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from app.models.chat import Attachment
from app.models.explanation import ExplainMode, ExplainStyle
from app.models.video import VideoDetails
from app.utils import format_file_size

# ============================================================================
# LENGTH BUDGETS
# ============================================================================

# Transcript is capped so long videos fit the model context with room for output
MAX_TRANSCRIPT_CHARS = 30000
MAX_DESCRIPTION_CHARS = 2000
MAX_HISTORY_TURNS = 10
MAX_TITLE_CHARS = 50

WORD_BUDGETS: Dict[ExplainStyle, Dict[ExplainMode, int]] = {
    ExplainStyle.STANDARD: {ExplainMode.SHORT: 10, ExplainMode.MEDIUM: 30, ExplainMode.LONG: 60},
    ExplainStyle.TEACHER: {ExplainMode.SHORT: 20, ExplainMode.MEDIUM: 50, ExplainMode.LONG: 100},
    ExplainStyle.EXPERT: {ExplainMode.SHORT: 15, ExplainMode.MEDIUM: 40, ExplainMode.LONG: 80},
    ExplainStyle.ACCESSIBLE: {ExplainMode.SHORT: 15, ExplainMode.MEDIUM: 35, ExplainMode.LONG: 70},
}

DEFAULT_NARRATION_DURATION = "1-2 minutes"
DEFAULT_NARRATION_COVERAGE = "all key points"

# ============================================================================
# PROMPTS
# ============================================================================

VIDEO_SUMMARY_PROMPT = """You are a study assistant. Write a study summary of the YouTube video below for a student who will review it later.

VIDEO TITLE: {title}
CHANNEL: {channel}
DURATION: {duration}
PUBLISHED: {published_at}
VIDEO URL: {video_url}

DESCRIPTION:
{description}

TRANSCRIPT:
{transcript}

Write the summary in plain text with exactly these sections, each starting on its own line:
Overview: 2-3 sentences on the main topic
Key points: the most important concepts, one per line
Details: important examples, numbers and explanations mentioned
Takeaways: what the student should remember or do
Conclusion: 1-2 sentences

Rules:
- Plain text only. No markdown, no asterisks, no hashes, no backticks
- Use only information from the title, description and transcript
- If there is no transcript, base the summary on the title and description and say that the details are limited"""

NO_TRANSCRIPT_NOTE = "(No transcript is available for this video.)"
TRUNCATION_NOTE = "\n[Transcript truncated for length]"

EXPLANATION_PROMPT = """{style_instruction}

TEXT TO EXPLAIN:
\"\"\"{text}\"\"\"

LENGTH: {length_instruction}
Write plain text only: no markdown, no headings, no asterisks. Do not repeat the text back."""

STYLE_INSTRUCTIONS = {
    ExplainStyle.STANDARD: "Explain the following text clearly and accurately for a student.",
    ExplainStyle.TEACHER: "You are a patient teacher. Explain the following text to a student, using one short concrete example.",
    ExplainStyle.EXPERT: "Explain the following text for an expert reader, using precise technical vocabulary.",
    ExplainStyle.ACCESSIBLE: "Explain the following text in simple everyday words for a beginner. Avoid jargon.",
}

COMPREHENSIVE_PROMPT = """{style_instruction}

TEXT TO EXPLAIN:
\"\"\"{text}\"\"\"

This explanation will be read aloud as audio narration.
- Cover {coverage} of the text; do not skip any of them
- Make it about {duration} long when spoken (around 150 words per minute)
- Use flowing spoken sentences in plain text: no lists, no markdown, no headings"""

CHAT_SYSTEM_PROMPT = """You are AutoMindMap, a study tutor that helps students understand what they are learning.

How you work:
- Give your own analysis and explanations. Never quote or copy source material verbatim
- Explain the reasoning behind ideas, not just the facts
- Connect concepts to related topics and real-world uses
- Check understanding with a follow-up question when it helps
- Keep a friendly, encouraging tone and plain student-friendly language"""

CHAT_ATTACHMENT_RULES = """The student shared the files listed above. You can see only their names, types and sizes, not their contents.
- Do not invent or guess what the files contain
- Ask the student which part they need help with, or to paste or describe the relevant section"""

CHAT_RESPONSE_RULES = """Reply to the current message with original explanation and analysis. Do not repeat source material word for word."""

CHAT_TITLE_PROMPT = """Write a short title (at most {max_chars} characters) for a study chat that starts with this student message:

\"{message}\"

Examples: Calculus Integration Help, Cell Structure Basics, Essay Structure Tips

Reply with the title only."""


class PromptKind(str, Enum):
    """Kinds of prompt the composer can build"""
    SUMMARY = "summary"
    EXPLANATION = "explanation"
    CHAT = "chat"
    CHAT_TITLE = "chat_title"


def word_budget(mode: ExplainMode, style: ExplainStyle = ExplainStyle.STANDARD) -> Optional[int]:
    """Word cap for an explanation, or None for comprehensive mode"""
    if mode == ExplainMode.COMPREHENSIVE:
        return None
    return WORD_BUDGETS[style][mode]


def _truncate(text: str, limit: int, note: str = "") -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + note


def build_summary_prompt(details: VideoDetails, video_url: str = "") -> str:
    """Study summary prompt for a resolved video"""
    transcript = details.captions.strip()
    if transcript:
        transcript = _truncate(transcript, MAX_TRANSCRIPT_CHARS, TRUNCATION_NOTE)
    else:
        transcript = NO_TRANSCRIPT_NOTE

    description = _truncate(details.description.strip(), MAX_DESCRIPTION_CHARS, "...") or "(none)"

    return VIDEO_SUMMARY_PROMPT.format(
        title=details.title,
        channel=details.channel_title or "Unknown Channel",
        duration=details.duration or "Unknown",
        published_at=details.published_at or "Unknown",
        video_url=video_url or "N/A",
        description=description,
        transcript=transcript
    )


def _length_instruction(mode: ExplainMode, budget: int) -> str:
    """Stricter wording for smaller budgets"""
    if mode == ExplainMode.SHORT:
        return f"Exactly one plain sentence of at most {budget} words. No lists."
    if mode == ExplainMode.MEDIUM:
        return f"2-3 plain sentences, at most {budget} words in total. No lists."
    return f"3-5 compact bullet points, one per line, at most {budget} words in total."


def build_explanation_prompt(
    text: str,
    mode: ExplainMode = ExplainMode.MEDIUM,
    style: ExplainStyle = ExplainStyle.STANDARD,
    duration_hint: Optional[str] = None,
    coverage_hint: Optional[str] = None
) -> str:
    """
    Explanation prompt for pasted text.

    Args:
        text: Text to explain (already validated as non-empty)
        mode: Length mode; comprehensive ignores the word budget table
        style: Voice of the explanation
        duration_hint: Spoken length target (comprehensive only)
        coverage_hint: What must be covered (comprehensive only)

    Returns:
        Prompt string
    """
    style_instruction = STYLE_INSTRUCTIONS[style]

    if mode == ExplainMode.COMPREHENSIVE:
        return COMPREHENSIVE_PROMPT.format(
            style_instruction=style_instruction,
            text=text,
            duration=duration_hint or DEFAULT_NARRATION_DURATION,
            coverage=coverage_hint or DEFAULT_NARRATION_COVERAGE
        )

    return EXPLANATION_PROMPT.format(
        style_instruction=style_instruction,
        text=text,
        length_instruction=_length_instruction(mode, word_budget(mode, style))
    )


def _role_label(role: str) -> str:
    return "Student" if role == "user" else "AutoMindMap"


def build_chat_prompt(
    history: Sequence[Dict[str, Any]],
    user_message: str,
    attachments: Optional[List[Attachment]] = None,
    max_turns: int = MAX_HISTORY_TURNS
) -> str:
    """
    Chat prompt: system framing, recent history, current message, attachments.

    Args:
        history: Previous messages (dicts with role and content), oldest first,
            not including the current message
        user_message: Current student message
        attachments: Files shared with the current message (metadata only)
        max_turns: How many previous messages to include (at most 10)

    Returns:
        Prompt string
    """
    max_turns = max(0, min(max_turns, MAX_HISTORY_TURNS))
    recent = list(history)[-max_turns:] if max_turns else []

    parts = [CHAT_SYSTEM_PROMPT, "", "CONVERSATION:"]

    if recent:
        parts.append("Previous messages:")
        for message in recent:
            parts.append(f"{_role_label(message.get('role', 'user'))}: {message.get('content', '')}")

    parts.append("")
    parts.append(f"Current student message: {user_message}")

    if attachments:
        parts.append("")
        parts.append("Attached files:")
        for attachment in attachments:
            parts.append(
                f"- {attachment.file_name} ({attachment.file_type}, {format_file_size(attachment.file_size)})"
            )
        parts.append("")
        parts.append(CHAT_ATTACHMENT_RULES)

    parts.append("")
    parts.append(CHAT_RESPONSE_RULES)
    return "\n".join(parts)


def build_chat_title_prompt(message: str) -> str:
    """Title prompt for a new chat"""
    return CHAT_TITLE_PROMPT.format(max_chars=MAX_TITLE_CHARS, message=message[:500])


_BUILDERS = {
    PromptKind.SUMMARY: build_summary_prompt,
    PromptKind.EXPLANATION: build_explanation_prompt,
    PromptKind.CHAT: build_chat_prompt,
    PromptKind.CHAT_TITLE: build_chat_title_prompt,
}


def compose(kind: PromptKind, **payload: Any) -> str:
    """Build a prompt of the given kind from keyword payload"""
    return _BUILDERS[PromptKind(kind)](**payload)
