"""Reflection generation — turns a ReflectionPayload into a short personal reflection.

Flow:
1. Validate the payload shape
2. Return a cached reflection if the identical payload was seen within the TTL
3. Call the LLM in a worker thread, bounded by REFLECTION_TIMEOUT_SECONDS
4. Record token usage, cache the text, return it

Any failure yields FALLBACK_REFLECTION with error=True and an error_type,
so the user always gets something kind to read.
"""

import asyncio
import json
import logging

import anthropic
import openai

from amaraday.config import (
    REFLECTION_TIMEOUT_SECONDS, REFLECTION_MAX_TOKENS, REFLECTION_TEMPERATURE,
    REFLECTION_CACHE_TTL_MINUTES, REFLECTION_CACHE_MAX_ENTRIES,
)
from amaraday.db import log_usage
from amaraday.llm import LLMProvider, get_client
from amaraday.models import ReflectionPayload, ReflectionResult
from amaraday.prompt_loader import get_full_prompt
from amaraday.reflection_cache import ReflectionCache

log = logging.getLogger(__name__)

FALLBACK_REFLECTION = (
    "Great work tracking your habits today. Keep building momentum! "
    "I'm still learning your patterns, so check back soon for more personalized insights."
)

TIMES_OF_DAY = ("morning", "afternoon", "evening")


def validate_payload(data: dict) -> bool:
    """Minimal structural check of a payload dict before it goes to the model."""
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("date"), str) or not data["date"]:
        return False
    if data.get("time_of_day") not in TIMES_OF_DAY:
        return False
    if not isinstance(data.get("note_text"), str):
        return False
    if not isinstance(data.get("habits"), list):
        return False
    return True


_TIMEOUT_ERRORS = (asyncio.TimeoutError, TimeoutError,
                   openai.APITimeoutError, anthropic.APITimeoutError)
_AUTH_ERRORS = (openai.AuthenticationError, anthropic.AuthenticationError)
_RATE_LIMIT_ERRORS = (openai.RateLimitError, anthropic.RateLimitError)
_CONNECTION_ERRORS = (openai.APIConnectionError, anthropic.APIConnectionError)


def classify_error(error: Exception) -> str:
    """Map an exception from the LLM call to a coarse error type.

    SDK exception types decide first; the message text is only consulted
    for errors raised outside the openai/anthropic clients.
    """
    # APITimeoutError subclasses APIConnectionError, so timeouts go first
    if isinstance(error, _TIMEOUT_ERRORS):
        return "api_timeout"
    if isinstance(error, _AUTH_ERRORS):
        return "invalid_api_key"
    if isinstance(error, _RATE_LIMIT_ERRORS):
        return "rate_limit"
    if isinstance(error, _CONNECTION_ERRORS):
        return "network_error"

    message = str(error).lower()
    if "timeout" in message or "timed out" in message:
        return "api_timeout"
    if "401" in message:
        return "invalid_api_key"
    if "429" in message:
        return "rate_limit"
    if "network" in message or "connection" in message:
        return "network_error"
    return "unknown_error"


def _fallback(error_type: str) -> ReflectionResult:
    log.warning("Reflection fallback: %s", error_type)
    return ReflectionResult(reflection=FALLBACK_REFLECTION, error=True, error_type=error_type)


class ReflectionGenerator:
    """Generates reflections through an LLM, with an owned TTL cache."""

    def __init__(
        self,
        client: LLMProvider | None = None,
        cache: ReflectionCache | None = None,
        timeout_seconds: float = REFLECTION_TIMEOUT_SECONDS,
        record_usage: bool = True,
    ):
        self._client = client
        if cache is None:
            cache = ReflectionCache(
                ttl_seconds=REFLECTION_CACHE_TTL_MINUTES * 60,
                max_entries=REFLECTION_CACHE_MAX_ENTRIES,
            )
        self.cache = cache
        self.timeout_seconds = timeout_seconds
        self.record_usage = record_usage

    def _messages(self, data: dict) -> list[dict]:
        return [
            {"role": "system", "content": get_full_prompt("reflection")},
            {"role": "user", "content": json.dumps(data, indent=2)},
        ]

    async def generate(self, payload: ReflectionPayload) -> ReflectionResult:
        data = payload.to_dict()
        if not validate_payload(data):
            return _fallback("invalid_payload")

        key = ReflectionCache.key_for(payload)
        cached = self.cache.get(key)
        if cached is not None:
            log.info("Reflection cache hit")
            return ReflectionResult(reflection=cached)

        try:
            client = self._client or get_client("reflection")
        except ValueError as e:
            log.error("Reflection client unavailable: %s", e)
            return _fallback("missing_api_key")

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    client.chat,
                    self._messages(data),
                    temperature=REFLECTION_TEMPERATURE,
                    max_tokens=REFLECTION_MAX_TOKENS,
                ),
                timeout=self.timeout_seconds,
            )
        except Exception as e:
            log.error("Reflection request failed: %s", e)
            return _fallback(classify_error(e))

        text = response.content.strip()
        if not text:
            return _fallback("unknown_error")

        if self.record_usage:
            try:
                log_usage(
                    response.prompt_tokens, response.completion_tokens,
                    response.total_tokens, model=response.model, purpose="reflection",
                )
            except Exception as e:
                log.warning("Could not record reflection usage: %s", e)

        self.cache.set(key, text)
        log.debug("Reflection text: %s", text)
        return ReflectionResult(
            reflection=text,
            usage={
                "input_tokens": response.prompt_tokens,
                "output_tokens": response.completion_tokens,
            },
        )
