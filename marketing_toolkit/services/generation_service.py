"""
Generation Service
------------------
The surface the UI layer calls: builds the payload for an intent, runs it
through the backoff executor and extracts typed results. Structured ad copy
and grounded trend analysis are the two supported modes.
"""

from __future__ import annotations

import time
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional

import structlog

from marketing_toolkit.core.config import GenerationSettings, get_settings
from marketing_toolkit.core.errors import GenerationError
from marketing_toolkit.logging_config import bind_generation_context, clear_generation_context
from marketing_toolkit.models.generation import (
    AdCopyBrief,
    AdCopyVariant,
    GenerationIntent,
    GroundedResult,
    TrendAnalysisRequest,
)
from marketing_toolkit.models.envelope import ResponseEnvelope
from marketing_toolkit.services import request_builder
from marketing_toolkit.services.request_executor import BackoffRequestExecutor, ProviderRequest
from marketing_toolkit.services.response_extractor import (
    extract_grounding,
    extract_structured,
    extract_text,
)
from marketing_toolkit.utils.error_handling import (
    AD_COPY_FLOW,
    TREND_ANALYSIS_FLOW,
    log_exception,
)
from marketing_toolkit.utils.retry import BackoffPolicy, RetryConfig

logger = structlog.get_logger(__name__)


class GenerationService:
    """Runs generation intents against the configured provider endpoint."""

    def __init__(
        self,
        settings: Optional[GenerationSettings] = None,
        *,
        executor: Optional[BackoffRequestExecutor] = None,
        policy: Optional[BackoffPolicy] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.policy = policy or RetryConfig.default_policy(self.settings)
        self._executor = executor or BackoffRequestExecutor(
            timeout_seconds=self.settings.timeout_seconds
        )
        if not self.settings.api_key:
            logger.warning("GEMINI_API_KEY is not set; provider calls will likely be rejected")

    async def __aenter__(self) -> "GenerationService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._executor.aclose()

    # ────────────────────────────────────────────────────────────
    #  Public interfaces
    # ────────────────────────────────────────────────────────────

    async def generate_structured(self, intent: GenerationIntent) -> List[AdCopyVariant]:
        """Schema-constrained generation returning ad copy variants in provider order."""
        if not intent.structured:
            raise ValueError("generate_structured requires an intent with an output schema")
        with _flow_context(AD_COPY_FLOW):
            envelope = await self._run(intent)
            return extract_structured(envelope)

    async def generate_grounded(self, intent: GenerationIntent) -> GroundedResult:
        """Free-text generation plus the web sources the provider cited."""
        with _flow_context(TREND_ANALYSIS_FLOW):
            envelope = await self._run(intent)
            text = extract_text(envelope)
            sources = extract_grounding(envelope)
            logger.info(
                "Grounded generation complete",
                text_length=len(text),
                source_count=len(sources),
            )
            return GroundedResult(text=text, sources=tuple(sources))

    async def generate_ad_copy(self, brief: AdCopyBrief) -> List[AdCopyVariant]:
        return await self.generate_structured(request_builder.ad_copy_intent(brief))

    async def analyse_trends(
        self, request: Optional[TrendAnalysisRequest] = None
    ) -> GroundedResult:
        return await self.generate_grounded(request_builder.trend_analysis_intent(request))

    # ────────────────────────────────────────────────────────────
    #  Private helpers
    # ────────────────────────────────────────────────────────────

    def _provider_request(self, intent: GenerationIntent) -> ProviderRequest:
        return ProviderRequest(
            url=self.settings.endpoint_url,
            payload=request_builder.build(intent),
            headers=self.settings.request_headers(),
        )

    async def _run(self, intent: GenerationIntent) -> ResponseEnvelope:
        started = time.monotonic()
        logger.info(
            "Generation started",
            model=self.settings.model,
            structured=intent.structured,
            grounded=intent.grounded,
        )
        try:
            envelope = await self._executor.execute(self._provider_request(intent), self.policy)
            logger.info(
                "Generation response received",
                latency_ms=int((time.monotonic() - started) * 1000),
                candidate_count=len(envelope.candidates),
            )
            return envelope
        except GenerationError as e:
            log_exception("Generation request failed", e, model=self.settings.model)
            raise


@contextmanager
def _flow_context(flow: str) -> Iterator[str]:
    """Bind a fresh request id and the flow name for the duration of one call."""
    request_id = uuid.uuid4().hex
    bind_generation_context(request_id=request_id, flow=flow)
    try:
        yield request_id
    finally:
        clear_generation_context()


__all__ = ["GenerationService"]
