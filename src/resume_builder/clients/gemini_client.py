"""Gemini generateContent client with async support and retry logic."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from resume_builder.clients.gemini_response import build_request_body, extract_text
from resume_builder.config import DEFAULT_GEMINI_ENDPOINT, GeminiConfig
from resume_builder.errors import AiServiceUnavailable, ConfigError, UnexpectedResponseShape

logger = logging.getLogger(__name__)

# Upstream statuses worth another attempt besides 5xx
RETRYABLE_STATUS = frozenset({408, 429})


@dataclass
class GeminiResponse:
    """Text payload of a successful call and how many attempts it took."""

    text: str
    attempts: int


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status >= 500 or status in RETRYABLE_STATUS
    return isinstance(exc, httpx.TransportError)


class GeminiClient:
    """Async Gemini REST client with exponential-backoff retries."""

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str = DEFAULT_GEMINI_ENDPOINT,
        timeout: float = 30.0,
        *,
        max_attempts: int = 3,
        backoff_base: float = 1.0,
        backoff_max: float = 8.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        key = api_key or os.environ.get("GEMINI_API_KEY")
        if not key:
            raise ConfigError(
                "Gemini API key required. Set GEMINI_API_KEY env var or pass api_key."
            )
        self._api_key = key
        self.endpoint = endpoint
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self._sleep = sleep
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_config(cls, config: GeminiConfig, **kwargs) -> GeminiClient:
        return cls(
            api_key=config.resolved_api_key,
            endpoint=config.endpoint,
            timeout=config.timeout,
            max_attempts=config.max_attempts,
            backoff_base=config.backoff_base,
            backoff_max=config.backoff_max,
            **kwargs,
        )

    async def _post(self, prompt: str) -> httpx.Response:
        """Make one API call. Client errors are final and raised as AiServiceUnavailable."""
        response = await self.client.post(
            self.endpoint,
            params={"key": self._api_key},
            json=build_request_body(prompt),
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if _is_transient(e):
                logger.warning("Gemini API server error: %d", response.status_code)
                raise
            logger.error("Gemini API client error: %d %s", response.status_code, response.text[:200])
            raise AiServiceUnavailable("Invalid request to AI service") from e
        return response

    async def generate(self, prompt: str) -> GeminiResponse:
        """Send a prompt and return the text of the first candidate."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.backoff_base,
                min=self.backoff_base,
                max=self.backoff_max,
            ),
            retry=retry_if_exception(_is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )
        attempts = 0
        logger.debug("Gemini call: %d prompt chars", len(prompt))
        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    response = await self._post(prompt)
        except AiServiceUnavailable:
            raise
        except httpx.HTTPError as e:
            logger.error("Gemini call failed after %d attempts", attempts, exc_info=True)
            raise AiServiceUnavailable(
                f"AI service unavailable after {attempts} attempts"
            ) from e

        try:
            text = extract_text(response.content)
        except UnexpectedResponseShape:
            logger.error("Unexpected Gemini response shape: %s", response.text[:200])
            raise
        logger.debug("Gemini response: %d chars after %d attempts", len(text), attempts)
        return GeminiResponse(text=text, attempts=attempts)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> GeminiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
