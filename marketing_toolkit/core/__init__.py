"""
Core package for the generation pipeline.

Re-exports the settings and the typed failure hierarchy so callers can
import them from ``marketing_toolkit.core`` without knowing the module layout.
"""

from marketing_toolkit.core.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_JITTER_MAX_MS,
    GenerationSettings,
    get_settings,
)
from marketing_toolkit.core.errors import (
    GenerationError,
    NonRetryableHttpError,
    ExhaustedRetries,
    EmptyGeneration,
    MalformedStructuredOutput,
)

__all__ = [
    # Settings
    "DEFAULT_API_BASE_URL",
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_BASE_DELAY_MS",
    "DEFAULT_JITTER_MAX_MS",
    "GenerationSettings",
    "get_settings",
    # Errors
    "GenerationError",
    "NonRetryableHttpError",
    "ExhaustedRetries",
    "EmptyGeneration",
    "MalformedStructuredOutput",
]
