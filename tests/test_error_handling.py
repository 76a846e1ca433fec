import pytest

from marketing_toolkit.core.errors import (
    EmptyGeneration,
    ExhaustedRetries,
    MalformedStructuredOutput,
    NonRetryableHttpError,
)
from marketing_toolkit.utils.error_handling import (
    AD_COPY_FLOW,
    TREND_ANALYSIS_FLOW,
    classify_generation_error,
    identify_error_type,
)
from marketing_toolkit.utils.retry import RateLimitedError


@pytest.mark.parametrize(
    "error,expected",
    [
        (ExhaustedRetries(RateLimitedError(), 3), "rate_limit"),
        (NonRetryableHttpError(500, "boom"), "http_error"),
        (NonRetryableHttpError(None, "ClientConnectorError: refused"), "network"),
        (EmptyGeneration(), "empty_generation"),
        (MalformedStructuredOutput("{", "invalid JSON"), "malformed_output"),
        (RuntimeError("?"), "unknown"),
    ],
)
def test_identify_error_type(error, expected):
    assert identify_error_type(error) == expected


def test_ad_copy_message_wording():
    result = classify_generation_error(EmptyGeneration(), AD_COPY_FLOW)

    assert result["user_message"] == (
        "Failed to generate copy: Failed to receive content from the model. "
        "Please check your inputs and network connection."
    )
    assert result["severity"] == "warning"


def test_trend_analysis_message_wording():
    error = NonRetryableHttpError(403, "forbidden")
    result = classify_generation_error(error, TREND_ANALYSIS_FLOW)

    assert result["user_message"].startswith("Failed to analyse news: ")
    assert result["user_message"].endswith("Ensure your API key is valid.")
    assert result["status"] == 403
    assert result["error_type"] == "http_error"


def test_malformed_output_exposes_raw_text():
    result = classify_generation_error(
        MalformedStructuredOutput("not json", "invalid JSON (Expecting value)"), AD_COPY_FLOW
    )
    assert result["raw_text"] == "not json"


def test_unknown_flow_and_error_still_classified():
    result = classify_generation_error(RuntimeError("odd"), "elsewhere")

    assert result["error_type"] == "unknown"
    assert result["severity"] == "error"
    assert result["user_message"] == "Generation failed: odd."
