"""AI gateway - rate-limited enhancement and scoring of resume text."""

from __future__ import annotations

import logging
import sqlite3
import time

from pydantic import BaseModel, ValidationError

from resume_builder.clients.gemini_client import GeminiClient, GeminiResponse
from resume_builder.clients.rate_limiter import RateLimiter
from resume_builder.errors import RateLimitExceeded, ResumeBuilderError
from resume_builder.logging.models import AiCallLog
from resume_builder.logging.usage_store import UsageStore
from resume_builder.models.enhancement import (
    EnhancedFields,
    EnhancementRequest,
    EnhancementResult,
    RawText,
    ScoreDetails,
    ScoreResult,
)
from resume_builder.pipeline.prompts import (
    ENHANCEMENT_KEYS,
    SCORING_KEYS,
    build_enhancement_prompt,
    build_scoring_prompt,
)
from resume_builder.utils.json_parser import try_parse_structured

logger = logging.getLogger(__name__)


class AiGateway:
    """Single entry point for AI enhancement and scoring.

    One rate-limit slot is taken per call before the client's retry loop
    starts; retries cover transport failures only. Model output that does
    not follow the requested JSON shape comes back as ``RawText``.
    """

    def __init__(
        self,
        client: GeminiClient,
        rate_limiter: RateLimiter,
        usage_store: UsageStore | None = None,
    ):
        self.client = client
        self.rate_limiter = rate_limiter
        self.usage_store = usage_store

    async def enhance(self, request: EnhancementRequest) -> EnhancementResult:
        """Rewrite the request's sections into more professional text."""
        prompt = build_enhancement_prompt(self._combined(request))
        log = AiCallLog(operation="enhance", resume_id=request.resume_id, prompt_chars=len(prompt))
        response = await self._call(prompt, log)
        result = self._to_result(response.text, ENHANCEMENT_KEYS, EnhancedFields)
        self._record(log, result.kind)
        logger.info("Successfully enhanced resume content (%s)", result.kind)
        return result

    async def score(self, request: EnhancementRequest) -> ScoreResult:
        """Evaluate the request's sections and return a 0-100 score with feedback."""
        prompt = build_scoring_prompt(self._combined(request))
        log = AiCallLog(operation="score", resume_id=request.resume_id, prompt_chars=len(prompt))
        response = await self._call(prompt, log)
        result = self._to_result(response.text, SCORING_KEYS, ScoreDetails)
        self._record(log, result.kind)
        logger.info("Successfully calculated resume score (%s)", result.kind)
        return result

    @staticmethod
    def _combined(request: EnhancementRequest) -> str:
        text = request.combined_text()
        if not text:
            logger.warning("Enhancement request has no content; sending empty resume text")
        return text

    async def _call(self, prompt: str, log: AiCallLog) -> GeminiResponse:
        start = time.monotonic()
        try:
            if not self.rate_limiter.try_acquire():
                raise RateLimitExceeded(
                    "Gemini API rate limit exceeded. Maximum "
                    f"{self.rate_limiter.max_requests} requests per "
                    f"{self.rate_limiter.window_seconds:.0f} seconds."
                )
            response = await self.client.generate(prompt)
        except ResumeBuilderError as e:
            log.elapsed_seconds = time.monotonic() - start
            log.success = False
            log.error_type = type(e).__name__
            log.error_message = str(e)
            self._save(log)
            raise
        log.elapsed_seconds = time.monotonic() - start
        log.attempts = response.attempts
        return response

    @staticmethod
    def _to_result(
        text: str,
        keys: tuple[str, ...],
        model: type[BaseModel],
    ) -> BaseModel:
        data = try_parse_structured(text, keys)
        if data is None:
            logger.warning("Could not parse AI response as JSON, keeping raw text")
            return RawText(payload=text)
        try:
            return model.model_validate(data)
        except ValidationError:
            logger.warning("AI response JSON has unexpected value types, keeping raw text")
            return RawText(payload=text)

    def _record(self, log: AiCallLog, result_kind: str) -> None:
        log.result_kind = result_kind
        self._save(log)

    def _save(self, log: AiCallLog) -> None:
        if self.usage_store is None:
            return
        try:
            self.usage_store.save_log(log)
        except sqlite3.Error:
            logger.warning("Failed to record %s call in usage log", log.operation, exc_info=True)

    async def aclose(self) -> None:
        await self.client.aclose()
