"""
Shared test configuration and fakes
"""
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Set test environment before any app module reads settings
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("YOUTUBE_API_KEY", None)
os.environ.pop("ALLOW_NO_AUTH", None)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions"


def completion(text):
    """Minimal stand-in for an OpenAI chat completion response"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=None
    )


def status_error(error_cls, status_code, body=None):
    """Build an openai status error as raised by the SDK"""
    request = httpx.Request("POST", GEMINI_URL)
    response = httpx.Response(status_code, request=request)
    return error_cls(f"Error code: {status_code}", response=response, body=body)


def fake_openai(*results):
    """
    AsyncOpenAI double. Each call to chat.completions.create returns (or
    raises) the next item of results; strings are wrapped as completions.
    """
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        side_effect=[completion(r) if isinstance(r, str) else r for r in results]
    )
    return client


def called_models(client):
    """Model names passed to chat.completions.create, in call order"""
    return [c.kwargs["model"] for c in client.chat.completions.create.call_args_list]


def sent_prompts(client):
    """User prompts passed to chat.completions.create, in call order"""
    return [c.kwargs["messages"][-1]["content"] for c in client.chat.completions.create.call_args_list]


@pytest.fixture
def make_generation_client():
    """Factory for a GenerationClient around a fake OpenAI client"""
    from app.services.generation_service import GenerationClient

    def _make(*results, fallback_model=None, max_attempts=3, timeout_seconds=5.0):
        return GenerationClient(
            primary_model="primary-model",
            fallback_model=fallback_model,
            max_attempts=max_attempts,
            retry_base_ms=1000,
            fallback_backoff_ms=250,
            timeout_seconds=timeout_seconds,
            client=fake_openai(*results)
        )

    return _make


@pytest.fixture
def video_details():
    """Resolved details for a typical video"""
    from app.models.video import VideoDetails
    return VideoDetails(
        title="How Cells Make Energy",
        description="A short lesson on cellular respiration.",
        duration="12:05",
        channel_title="Bio Basics",
        published_at="2024-03-01T10:00:00Z",
        view_count="1200",
        captions="Today we look at the mitochondria and how they produce ATP."
    )


@pytest.fixture
def youtube_stub(video_details):
    """YouTube service double that resolves every ID to video_details"""
    stub = MagicMock()
    stub.resolve = AsyncMock(return_value=video_details)
    return stub
