"""Global pytest fixtures for the generation pipeline tests.

Provider calls never leave the process: executor and service tests inject a
fake aiohttp session, and backoff sleeps are recorded instead of awaited.
"""

from __future__ import annotations

import pytest
import structlog

_SETTINGS_ENV = (
    "GEMINI_API_KEY",
    "GENERATION_API_BASE_URL",
    "GENERATION_MODEL",
    "GENERATION_TIMEOUT_SECONDS",
    "GENERATION_MAX_ATTEMPTS",
    "GENERATION_BASE_DELAY_MS",
    "GENERATION_JITTER_MAX_MS",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Start every test from default settings and an empty log context."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def recorded_sleeps():
    """An injectable async sleep that records requested delays (seconds)."""
    delays = []

    async def _sleep(seconds):
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep
