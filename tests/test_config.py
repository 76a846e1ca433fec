import pytest

from marketing_toolkit.core.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_MODEL,
    GenerationSettings,
    get_settings,
)
from marketing_toolkit.services.generation_service import GenerationService


def test_defaults_without_environment():
    settings = get_settings()
    assert settings.api_key == ""
    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.model == DEFAULT_MODEL
    assert settings.timeout_seconds == 60.0
    assert settings.max_attempts == 3


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "  secret  ")
    monkeypatch.setenv("GENERATION_MODEL", "gemini-test")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("GENERATION_JITTER_MAX_MS", "0")

    settings = get_settings()
    assert settings.api_key == "secret"
    assert settings.model == "gemini-test"
    assert settings.timeout_seconds == 12.5
    assert settings.jitter_max_ms == 0


def test_unparseable_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("GENERATION_MAX_ATTEMPTS", "lots")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "")
    settings = get_settings()
    assert settings.max_attempts == 3
    assert settings.timeout_seconds == 60.0


def test_endpoint_url_is_model_specific():
    settings = GenerationSettings(api_base_url="https://example.test/v1beta/", model="m-1")
    assert settings.endpoint_url == "https://example.test/v1beta/models/m-1:generateContent"


def test_api_key_travels_in_header_only():
    assert GenerationSettings().request_headers() == {"Content-Type": "application/json"}

    settings = GenerationSettings(api_key="k")
    assert settings.request_headers()["x-goog-api-key"] == "k"
    assert "k" not in settings.endpoint_url


@pytest.mark.parametrize(
    "name,value,field,default",
    [
        ("GENERATION_MAX_ATTEMPTS", "0", "max_attempts", 3),
        ("GENERATION_MAX_ATTEMPTS", "-2", "max_attempts", 3),
        ("GENERATION_BASE_DELAY_MS", "0", "base_delay_ms", 1000),
        ("GENERATION_JITTER_MAX_MS", "-1", "jitter_max_ms", 1000),
    ],
)
def test_out_of_range_numbers_fall_back(monkeypatch, name, value, field, default):
    monkeypatch.setenv(name, value)
    assert getattr(get_settings(), field) == default


def test_out_of_range_settings_still_build_a_service(monkeypatch):
    monkeypatch.setenv("GENERATION_MAX_ATTEMPTS", "0")
    monkeypatch.setenv("GENERATION_BASE_DELAY_MS", "0")
    monkeypatch.setenv("GENERATION_JITTER_MAX_MS", "-5")

    service = GenerationService()

    assert service.policy.max_attempts == 3
    assert service.policy.base_delay_ms == 1000
    assert service.policy.jitter_max_ms == 1000
