"""
Error logging and user-facing classification helpers.

The pipeline itself always propagates typed failures; these helpers are for
the caller that has to turn a failure into a message on screen.
"""

from __future__ import annotations

import traceback
from typing import Any, Dict

import structlog

from marketing_toolkit.core.errors import (
    EmptyGeneration,
    ExhaustedRetries,
    GenerationError,
    MalformedStructuredOutput,
    NonRetryableHttpError,
)

_logger = structlog.get_logger(__name__)

AD_COPY_FLOW = "ad_copy"
TREND_ANALYSIS_FLOW = "trend_analysis"


def log_exception(context: str, exc: Exception, **fields: Any) -> None:
    """Log an exception with context; never raises."""
    try:
        _logger.warning(context, error=str(exc), error_type=type(exc).__name__, **fields)
    except Exception:
        # Avoid secondary failures during error handling
        pass


# --------------------------------------------------------------------------- #
#                            Error classification                             #
# --------------------------------------------------------------------------- #

ERROR_CLASSIFICATIONS: Dict[str, Dict[str, Any]] = {
    "rate_limit": {
        "detail": "The generation service is busy right now. Please try again in a minute.",
        "severity": "warning",
    },
    "http_error": {
        "detail": "The generation service rejected the request.",
        "severity": "error",
    },
    "network": {
        "detail": "The generation service could not be reached.",
        "severity": "error",
    },
    "empty_generation": {
        "detail": "The model returned no content.",
        "severity": "warning",
    },
    "malformed_output": {
        "detail": "The model returned copy in an unexpected format.",
        "severity": "warning",
    },
}

# Prefix and hint per flow, as shown by the two generator screens
FLOW_MESSAGES: Dict[str, Dict[str, str]] = {
    AD_COPY_FLOW: {
        "prefix": "Failed to generate copy",
        "hint": "Please check your inputs and network connection.",
    },
    TREND_ANALYSIS_FLOW: {
        "prefix": "Failed to analyse news",
        "hint": "Ensure your API key is valid.",
    },
}


def identify_error_type(error: Exception) -> str:
    if isinstance(error, ExhaustedRetries):
        return "rate_limit"
    if isinstance(error, NonRetryableHttpError):
        return "network" if error.status is None else "http_error"
    if isinstance(error, MalformedStructuredOutput):
        return "malformed_output"
    if isinstance(error, EmptyGeneration):
        return "empty_generation"
    return "unknown"


def classify_generation_error(error: Exception, flow: str) -> Dict[str, Any]:
    """Classify ``error`` and build the user-facing message while logging it.

    Returns a dict with ``error_type``, ``severity``, ``user_message`` and, for
    malformed structured output, the ``raw_text`` to show for debugging.
    """
    error_type = identify_error_type(error)
    info = ERROR_CLASSIFICATIONS.get(error_type, {"detail": "", "severity": "error"})
    wording = FLOW_MESSAGES.get(flow, {"prefix": "Generation failed", "hint": ""})
    user_message = " ".join(
        part for part in (f"{wording['prefix']}: {str(error).rstrip('.')}.", wording["hint"]) if part
    )

    result: Dict[str, Any] = {
        "error_type": error_type,
        "severity": info["severity"],
        "detail": info["detail"],
        "user_message": user_message,
    }
    if isinstance(error, MalformedStructuredOutput):
        result["raw_text"] = error.raw_text
    if isinstance(error, NonRetryableHttpError):
        result["status"] = error.status

    log = _logger.error if info["severity"] == "error" else _logger.warning
    log(
        "Classified generation error",
        flow=flow,
        error_type=error_type,
        error_message=str(error),
        severity=info["severity"],
        stack_trace=(
            traceback.format_exc()
            if not isinstance(error, GenerationError)
            else None
        ),
    )
    return result
