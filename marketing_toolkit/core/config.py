"""
Core configuration for the generation pipeline

Centralises the tunable knobs (endpoint, model, timeout and retry budget) so
they are not scattered through the services. Every value can be overridden via
environment variables, optionally loaded from a ``.env`` file.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash-preview-09-2025"
DEFAULT_TIMEOUT_SECONDS = 60.0

# 3 tries, 2^i seconds + up to 1s jitter between them
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 1000
DEFAULT_JITTER_MAX_MS = 1000


def _env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    """Integer env var; unparseable values and values below ``minimum`` yield ``default``."""
    try:
        value = int(os.getenv(name, str(default)) or default)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)) or default)
    except ValueError:
        return default


@dataclass(frozen=True)
class GenerationSettings:
    """Resolved settings for one :class:`GenerationService`."""

    api_key: str = ""
    api_base_url: str = DEFAULT_API_BASE_URL
    model: str = DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    jitter_max_ms: int = DEFAULT_JITTER_MAX_MS

    @property
    def endpoint_url(self) -> str:
        """Fixed ``generateContent`` endpoint for the configured model."""
        return f"{self.api_base_url.rstrip('/')}/models/{self.model}:generateContent"

    def request_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key
        return headers


def get_settings() -> GenerationSettings:
    """Read settings from the environment at call time."""
    return GenerationSettings(
        api_key=(os.getenv("GEMINI_API_KEY") or "").strip(),
        api_base_url=os.getenv("GENERATION_API_BASE_URL") or DEFAULT_API_BASE_URL,
        model=os.getenv("GENERATION_MODEL") or DEFAULT_MODEL,
        timeout_seconds=_env_float("GENERATION_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        max_attempts=_env_int("GENERATION_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS, minimum=1),
        base_delay_ms=_env_int("GENERATION_BASE_DELAY_MS", DEFAULT_BASE_DELAY_MS, minimum=1),
        jitter_max_ms=_env_int("GENERATION_JITTER_MAX_MS", DEFAULT_JITTER_MAX_MS, minimum=0),
    )
