"""
Response Extractor
------------------
Pulls generated text, structured ad copy and grounding citations out of a
provider :class:`ResponseEnvelope`. Each envelope level is checked explicitly;
a missing level surfaces as a typed failure instead of a silent ``None``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, List, Union

import structlog
from pydantic import TypeAdapter, ValidationError

from marketing_toolkit.core.errors import EmptyGeneration, MalformedStructuredOutput
from marketing_toolkit.models.envelope import ResponseEnvelope
from marketing_toolkit.models.generation import (
    MAX_VARIANTS,
    MIN_VARIANTS,
    AdCopyVariant,
    GroundingSource,
)

logger = structlog.get_logger(__name__)

EnvelopeLike = Union[ResponseEnvelope, Mapping]

_VARIANTS = TypeAdapter(List[AdCopyVariant])


def _as_envelope(envelope: EnvelopeLike) -> ResponseEnvelope:
    return ResponseEnvelope.from_payload(envelope)


def extract_text(envelope: EnvelopeLike) -> str:
    """Return ``candidates[0].content.parts[0].text``.

    Raises:
        EmptyGeneration: when any level of that path is absent or the text is blank.
    """
    env = _as_envelope(envelope)
    candidate = env.first_candidate()
    if candidate is None:
        raise EmptyGeneration("Provider response contained no candidates.")
    if candidate.content is None or not candidate.content.parts:
        raise EmptyGeneration(
            f"Provider candidate has no content (finish reason: {candidate.finish_reason or 'unknown'})."
        )
    text = candidate.content.parts[0].text
    if text is None or not text.strip():
        raise EmptyGeneration("Provider returned an empty text part.")
    return text


def extract_structured(envelope: EnvelopeLike) -> List[AdCopyVariant]:
    """Parse schema-mode output into ad copy variants, preserving provider order.

    Raises:
        EmptyGeneration: when no text was returned.
        MalformedStructuredOutput: when the text is not a JSON array of one to five
            complete variants.
    """
    text = extract_text(envelope)
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Structured output is not valid JSON", error=str(e), length=len(text))
        raise MalformedStructuredOutput(text, f"invalid JSON ({e.msg})") from e

    if not isinstance(data, list):
        raise MalformedStructuredOutput(
            text, f"expected a JSON array, got {type(data).__name__}"
        )

    if not MIN_VARIANTS <= len(data) <= MAX_VARIANTS:
        raise MalformedStructuredOutput(
            text, f"expected {MIN_VARIANTS}-{MAX_VARIANTS} variants, got {len(data)}"
        )

    try:
        variants = _VARIANTS.validate_python(data)
    except ValidationError as e:
        logger.warning("Structured output failed validation", error_count=e.error_count())
        raise MalformedStructuredOutput(text, _describe(e)) from e

    logger.info("Structured output parsed", variant_count=len(variants))
    return variants


def extract_grounding(envelope: EnvelopeLike) -> List[GroundingSource]:
    """Return cited web sources; never raises.

    Attributions missing either a URI or a title are dropped.
    """
    env = _as_envelope(envelope)
    candidate = env.first_candidate()
    if candidate is None or candidate.grounding_metadata is None:
        return []

    sources: List[GroundingSource] = []
    for attribution in candidate.grounding_metadata.grounding_attributions:
        web = attribution.web
        if web is None or not web.uri or not web.title:
            continue
        sources.append(GroundingSource(uri=web.uri, title=web.title))
    return sources


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(p) for p in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "invalid value")


__all__ = ["extract_text", "extract_structured", "extract_grounding"]
