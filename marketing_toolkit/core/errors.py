"""Typed failures surfaced by the generation pipeline."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "GenerationError",
    "NonRetryableHttpError",
    "ExhaustedRetries",
    "EmptyGeneration",
    "MalformedStructuredOutput",
]


class GenerationError(Exception):
    """Base class for every failure the pipeline propagates to callers."""


class NonRetryableHttpError(GenerationError):
    """The provider call failed in a way that is not retried.

    ``status`` is ``None`` when the final attempt failed at transport level
    (connection refused, timeout) rather than with an HTTP response.
    """

    def __init__(self, status: Optional[int], body: str = "") -> None:
        self.status = status
        self.body = body
        if status is None:
            message = f"Provider request failed: {body}"
        else:
            message = f"Provider request failed with HTTP {status}: {body}"
        super().__init__(message)


class ExhaustedRetries(GenerationError):
    """The retry budget ran out while the provider kept rate-limiting."""

    def __init__(self, last_cause: Exception, attempts: int) -> None:
        self.last_cause = last_cause
        self.attempts = attempts
        super().__init__(
            f"Provider still rate-limited after {attempts} attempt(s): {last_cause}"
        )


class EmptyGeneration(GenerationError):
    """The provider answered successfully but returned no usable text."""

    def __init__(self, message: str = "Failed to receive content from the model.") -> None:
        super().__init__(message)


class MalformedStructuredOutput(GenerationError):
    """Schema-mode text could not be parsed into the expected shape."""

    def __init__(self, raw_text: str, reason: str) -> None:
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"Structured output did not match the expected shape: {reason}")
