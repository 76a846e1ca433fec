"""
Retry and backoff configuration for provider calls.
Consolidates the backoff policy, delay math, and the internal retry signals.
"""

from __future__ import annotations

import random
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field
from tenacity import RetryCallState

from marketing_toolkit.core.config import GenerationSettings, get_settings

logger = structlog.get_logger(__name__)

RATE_LIMIT_STATUS = 429


class BackoffPolicy(BaseModel):
    """Retry budget for one logical request.

    Delay before retrying after attempt ``i`` (0-indexed) is
    ``base_delay_ms * 2**i + uniform(0, jitter_max_ms)`` milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(3, ge=1)
    base_delay_ms: int = Field(1000, gt=0)
    jitter_max_ms: int = Field(1000, ge=0)

    def minimum_delay_ms(self, attempt: int) -> int:
        return self.base_delay_ms * (2 ** max(0, attempt))

    def delay_ms(self, attempt: int) -> float:
        return calculate_backoff_delay_ms(self, attempt)


class RetryConfig:
    """Builds policies from the environment-backed settings."""

    @staticmethod
    def default_policy(settings: Optional[GenerationSettings] = None) -> BackoffPolicy:
        settings = settings or get_settings()
        return BackoffPolicy(
            max_attempts=settings.max_attempts,
            base_delay_ms=settings.base_delay_ms,
            jitter_max_ms=settings.jitter_max_ms,
        )


def calculate_backoff_delay_ms(policy: BackoffPolicy, attempt: int) -> float:
    """
    Exponential backoff with additive jitter for 0-indexed ``attempt``.
    """
    jitter = random.uniform(0, policy.jitter_max_ms) if policy.jitter_max_ms else 0.0
    return policy.minimum_delay_ms(attempt) + jitter


def backoff_wait(policy: BackoffPolicy):
    """
    Tenacity ``wait`` strategy (seconds) implementing ``policy``.
    """

    def _wait(retry_state: RetryCallState) -> float:
        # tenacity counts attempts from 1
        return calculate_backoff_delay_ms(policy, retry_state.attempt_number - 1) / 1000.0

    return _wait


def log_before_retry(retry_state: RetryCallState) -> None:
    """Tenacity ``before_sleep`` hook."""
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else None
    if isinstance(error, RateLimitedError):
        event = "Rate limit hit; retrying after backoff"
    else:
        event = "Network error; retrying after backoff"
    logger.warning(
        event,
        attempt=retry_state.attempt_number,
        delay_seconds=round(delay, 3) if delay is not None else None,
        error=str(error),
    )


class RateLimitedError(Exception):
    """Raised for a rate-limited provider answer; retried by the executor."""

    def __init__(self, status: int = RATE_LIMIT_STATUS, body: Any = "") -> None:
        super().__init__(f"Rate limited (HTTP {status})")
        self.status = status
        self.body = body


class TransportFailure(Exception):
    """Raised when no HTTP response arrived (unreachable host, timeout)."""
