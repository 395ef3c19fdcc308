"""
Tests for Prompt Service

Tests:
- Word budget table ordering
- Explanation prompts (budgeted and comprehensive)
- Summary prompt transcript handling
- Chat prompt history window and attachment rules
"""
import pytest

from app.models.chat import Attachment
from app.models.explanation import ExplainMode, ExplainStyle
from app.models.video import VideoDetails
from app.services.prompt_service import (
    CHAT_ATTACHMENT_RULES, MAX_TRANSCRIPT_CHARS, NO_TRANSCRIPT_NOTE, PromptKind,
    build_chat_prompt, build_chat_title_prompt, build_explanation_prompt,
    build_summary_prompt, compose, word_budget
)

BUDGETED_MODES = [ExplainMode.SHORT, ExplainMode.MEDIUM, ExplainMode.LONG]


class TestWordBudget:
    """Test cases for word_budget"""

    def test_standard_values(self):
        assert word_budget(ExplainMode.SHORT, ExplainStyle.STANDARD) == 10
        assert word_budget(ExplainMode.MEDIUM, ExplainStyle.STANDARD) == 30
        assert word_budget(ExplainMode.LONG, ExplainStyle.STANDARD) == 60

    @pytest.mark.parametrize("mode", BUDGETED_MODES)
    def test_teacher_never_below_standard(self, mode):
        assert word_budget(mode, ExplainStyle.TEACHER) >= word_budget(mode, ExplainStyle.STANDARD)

    @pytest.mark.parametrize("style", list(ExplainStyle))
    def test_budgets_grow_with_mode(self, style):
        short = word_budget(ExplainMode.SHORT, style)
        medium = word_budget(ExplainMode.MEDIUM, style)
        long = word_budget(ExplainMode.LONG, style)
        assert long > medium > short

    @pytest.mark.parametrize("style", list(ExplainStyle))
    def test_comprehensive_has_no_budget(self, style):
        assert word_budget(ExplainMode.COMPREHENSIVE, style) is None


class TestExplanationPrompt:
    """Test cases for build_explanation_prompt"""

    def test_short_asks_for_one_sentence(self):
        prompt = build_explanation_prompt("Mitochondria make ATP.", ExplainMode.SHORT, ExplainStyle.STANDARD)

        assert "Mitochondria make ATP." in prompt
        assert "one plain sentence" in prompt
        assert "at most 10 words" in prompt

    def test_style_changes_voice_and_budget(self):
        prompt = build_explanation_prompt("Osmosis.", ExplainMode.MEDIUM, ExplainStyle.TEACHER)

        assert "patient teacher" in prompt
        assert "at most 50 words" in prompt

    def test_comprehensive_uses_hints(self):
        prompt = build_explanation_prompt(
            "The French Revolution.",
            ExplainMode.COMPREHENSIVE,
            ExplainStyle.ACCESSIBLE,
            duration_hint="3 minutes",
            coverage_hint="causes and consequences"
        )

        assert "3 minutes" in prompt
        assert "causes and consequences" in prompt
        assert "read aloud" in prompt
        assert "at most" not in prompt

    def test_comprehensive_defaults(self):
        prompt = build_explanation_prompt("Plate tectonics.", ExplainMode.COMPREHENSIVE)

        assert "1-2 minutes" in prompt
        assert "all key points" in prompt


class TestSummaryPrompt:
    """Test cases for build_summary_prompt"""

    def test_includes_metadata_and_transcript(self, video_details):
        prompt = build_summary_prompt(video_details, video_url="https://youtu.be/abcdefghijk")

        assert "How Cells Make Energy" in prompt
        assert "Bio Basics" in prompt
        assert "12:05" in prompt
        assert "mitochondria" in prompt
        assert "https://youtu.be/abcdefghijk" in prompt
        assert NO_TRANSCRIPT_NOTE not in prompt

    def test_missing_transcript_is_noted(self):
        details = VideoDetails(title="Silent Video")

        prompt = build_summary_prompt(details)

        assert NO_TRANSCRIPT_NOTE in prompt
        assert "Unknown" in prompt

    def test_long_transcript_is_truncated(self):
        details = VideoDetails(title="Lecture", captions="word " * 20000)

        prompt = build_summary_prompt(details)

        assert "[Transcript truncated for length]" in prompt
        assert len(prompt) < MAX_TRANSCRIPT_CHARS + 3000


class TestChatPrompt:
    """Test cases for build_chat_prompt"""

    def test_includes_only_recent_history(self):
        history = [
            {"role": "user" if i % 2 == 0 else "assistant", "content": f"message-{i:02d}"}
            for i in range(14)
        ]

        prompt = build_chat_prompt(history, "What next?")

        assert "message-03" not in prompt
        assert "message-04" in prompt
        assert "message-13" in prompt
        assert "Current student message: What next?" in prompt

    def test_labels_roles(self):
        history = [
            {"role": "user", "content": "What is DNA?"},
            {"role": "assistant", "content": "A molecule that stores genetic information."}
        ]

        prompt = build_chat_prompt(history, "And RNA?")

        assert "Student: What is DNA?" in prompt
        assert "AutoMindMap: A molecule that stores genetic information." in prompt

    def test_max_turns_is_capped(self):
        history = [{"role": "user", "content": f"turn-{i:02d}"} for i in range(20)]

        prompt = build_chat_prompt(history, "Hi", max_turns=50)

        assert "turn-09" not in prompt
        assert "turn-10" in prompt

    def test_attachments_are_metadata_only(self):
        attachments = [Attachment(file_name="notes.pdf", file_type="application/pdf", file_size=1536)]

        prompt = build_chat_prompt([], "Can you check my notes?", attachments=attachments)

        assert "- notes.pdf (application/pdf, 1.5 KB)" in prompt
        assert CHAT_ATTACHMENT_RULES in prompt
        assert "Do not invent" in prompt

    def test_no_attachment_rules_without_attachments(self):
        prompt = build_chat_prompt([], "Hello")

        assert CHAT_ATTACHMENT_RULES not in prompt
        assert "Previous messages" not in prompt


class TestTitleAndCompose:

    def test_title_prompt(self):
        prompt = build_chat_title_prompt("Help me integrate x squared")

        assert "Help me integrate x squared" in prompt
        assert "50 characters" in prompt

    def test_compose_dispatches_by_kind(self):
        assert compose(PromptKind.CHAT_TITLE, message="Hi") == build_chat_title_prompt("Hi")
        assert compose("explanation", text="Gravity.", mode=ExplainMode.SHORT) == build_explanation_prompt(
            "Gravity.", ExplainMode.SHORT
        )

    def test_compose_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            compose("poem", text="x")
