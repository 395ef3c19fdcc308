"""
Generation Service

Calls the Gemini text model (through its OpenAI-compatible endpoint) with
bounded retries:

- Transient failures (capacity exhausted, service unavailable, timeouts)
  are retried on the same model with exponential backoff
- A lighter fallback model is tried once, consuming one attempt slot
- Anything else fails fast
- Every attempt is bounded by an explicit timeout

Callers only ever see the generated text or a single GenerationFailed.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from openai import AsyncOpenAI, APIConnectionError, APIStatusError, OpenAIError

from app.settings import get_settings

logger = logging.getLogger(__name__)

RETRIABLE_STATUS_CODES = {429, 503, 504}
RETRIABLE_UPSTREAM_STATUSES = {"RESOURCE_EXHAUSTED", "UNAVAILABLE", "DEADLINE_EXCEEDED"}

DEFAULT_SYSTEM_PROMPT = "You are a helpful study assistant. Answer in plain text."


class FailureKind(str, Enum):
    """How a failed attempt should be treated"""
    RETRIABLE = "retriable"
    TERMINAL = "terminal"


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    RETRIABLE_FAILURE = "retriable-failure"
    TERMINAL_FAILURE = "terminal-failure"


@dataclass
class GenerationAttempt:
    """One call to the model within a single generate() run"""
    model_name: str
    attempt_number: int
    outcome: AttemptOutcome
    error: Optional[str] = None


class EmptyCompletionError(Exception):
    """The model answered without any text"""


class GenerationFailed(Exception):
    """All attempts are exhausted, or a failure could not be retried"""

    def __init__(self, message: str, attempts: Optional[List[GenerationAttempt]] = None):
        super().__init__(message)
        self.attempts = attempts or []


def _upstream_status(body: Any) -> Optional[str]:
    """Pull the Google status string (e.g. RESOURCE_EXHAUSTED) out of an error body"""
    if isinstance(body, list) and body:
        body = body[0]
    if not isinstance(body, dict):
        return None
    error = body.get("error", body)
    if isinstance(error, dict):
        status = error.get("status") or error.get("code")
        return str(status).upper() if status is not None else None
    return None


def classify_error(error: BaseException) -> FailureKind:
    """
    Decide whether a failed attempt may be retried.

    Only a closed set of known transient conditions is retriable; anything
    unrecognized is terminal.
    """
    if isinstance(error, asyncio.TimeoutError):
        return FailureKind.RETRIABLE
    # Also covers APITimeoutError
    if isinstance(error, APIConnectionError):
        return FailureKind.RETRIABLE
    if isinstance(error, APIStatusError):
        if error.status_code in RETRIABLE_STATUS_CODES:
            return FailureKind.RETRIABLE
        if _upstream_status(error.body) in RETRIABLE_UPSTREAM_STATUSES:
            return FailureKind.RETRIABLE
    return FailureKind.TERMINAL


class GenerationClient:
    """Text generation with retry, backoff and one-time model fallback"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        primary_model: str = "gemini-2.5-flash",
        fallback_model: Optional[str] = None,
        max_attempts: int = 3,
        retry_base_ms: int = 1000,
        fallback_backoff_ms: int = 500,
        timeout_seconds: float = 60.0,
        max_tokens: int = 4000,
        temperature: float = 0.4,
        base_url: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None
    ):
        """
        Args:
            api_key: Gemini API key, used when no client is passed
            primary_model: Model tried first
            fallback_model: Lighter model tried once, or None
            max_attempts: Total attempts per generate() call, fallback included
            retry_base_ms: Backoff base; attempt n waits base * 2^(n-1) ms
            fallback_backoff_ms: Fixed wait before switching to the fallback
            timeout_seconds: Upper bound for a single attempt
            base_url: OpenAI-compatible endpoint
            client: Pre-built AsyncOpenAI client (tests pass a double here)
        """
        if client is None:
            if not api_key:
                raise ValueError("A Gemini API key is required to create the generation client")
            # SDK retries are disabled; generate() owns the retry policy
            client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0, timeout=timeout_seconds)

        self.client = client
        self.primary_model = primary_model
        self.fallback_model = fallback_model or None
        self.max_attempts = max_attempts
        self.retry_base_ms = retry_base_ms
        self.fallback_backoff_ms = fallback_backoff_ms
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens
        self.temperature = temperature

        logger.info(
            f"Generation client initialized with model: {self.primary_model} "
            f"(fallback: {self.fallback_model}, attempts: {self.max_attempts})"
        )

    async def _call_model(self, model: str, prompt: str, system_prompt: str) -> str:
        """Single bounded call to the model"""
        response = await asyncio.wait_for(
            self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt}
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens
            ),
            timeout=self.timeout_seconds
        )

        if getattr(response, "usage", None):
            logger.info(
                f"LLM usage ({model}) - Input: {response.usage.prompt_tokens}, "
                f"Output: {response.usage.completion_tokens}"
            )

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise EmptyCompletionError(f"{model} returned an empty response")
        return content

    async def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_attempts: Optional[int] = None,
        system_prompt: Optional[str] = None
    ) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Fully composed prompt
            model: Primary model override
            max_attempts: Attempt budget override; <= 1 means no retry or fallback
            system_prompt: System message override

        Returns:
            Raw model text

        Raises:
            GenerationFailed: After the attempt budget is exhausted or on a
                failure that cannot be retried
        """
        current_model = model or self.primary_model
        budget = self.max_attempts if max_attempts is None else max_attempts
        system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        fallback_used = False
        attempts: List[GenerationAttempt] = []
        attempt = 1

        while True:
            try:
                text = await self._call_model(current_model, prompt, system_prompt)
                attempts.append(GenerationAttempt(current_model, attempt, AttemptOutcome.SUCCESS))
                if attempt > 1:
                    logger.info(f"Generation succeeded on attempt {attempt} with {current_model}")
                return text
            except (OpenAIError, asyncio.TimeoutError, EmptyCompletionError) as e:
                kind = classify_error(e)
                outcome = (
                    AttemptOutcome.RETRIABLE_FAILURE if kind == FailureKind.RETRIABLE
                    else AttemptOutcome.TERMINAL_FAILURE
                )
                attempts.append(GenerationAttempt(current_model, attempt, outcome, error=str(e) or type(e).__name__))
                logger.warning(
                    f"Generation attempt {attempt}/{budget} with {current_model} failed "
                    f"({kind.value}): {type(e).__name__}: {e}"
                )

                # The fallback gets exactly one try
                if attempt >= budget or fallback_used:
                    raise self._failed(attempts) from e

                can_fall_back = (
                    self.fallback_model is not None
                    and not fallback_used
                    and self.fallback_model != current_model
                )

                if can_fall_back and (kind == FailureKind.TERMINAL or attempt + 1 == budget):
                    delay_ms = self.fallback_backoff_ms
                    logger.info(f"Switching to fallback model {self.fallback_model} in {delay_ms}ms")
                    current_model = self.fallback_model
                    fallback_used = True
                elif kind == FailureKind.RETRIABLE:
                    delay_ms = self.retry_base_ms * (2 ** (attempt - 1))
                    logger.info(f"Retrying {current_model} in {delay_ms}ms")
                else:
                    raise self._failed(attempts) from e

                await asyncio.sleep(delay_ms / 1000)
                attempt += 1

    def _failed(self, attempts: List[GenerationAttempt]) -> GenerationFailed:
        logger.error(
            "Generation failed after %d attempt(s): %s",
            len(attempts),
            ", ".join(f"{a.model_name}#{a.attempt_number}={a.outcome.value}" for a in attempts)
        )
        return GenerationFailed(
            "The AI service is temporarily unavailable. Please try again in a moment.",
            attempts=attempts
        )


# Singleton instance
_generation_client: Optional[GenerationClient] = None


def get_generation_client() -> GenerationClient:
    """Get or create the generation client from settings"""
    global _generation_client
    if _generation_client is None:
        settings = get_settings()
        _generation_client = GenerationClient(
            api_key=settings.gemini_api_key,
            primary_model=settings.llm_model,
            fallback_model=settings.fallback_model,
            max_attempts=settings.llm_max_attempts,
            retry_base_ms=settings.llm_retry_base_ms,
            fallback_backoff_ms=settings.llm_fallback_backoff_ms,
            timeout_seconds=settings.llm_timeout_seconds,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            base_url=settings.gemini_base_url
        )
    return _generation_client
