"""Provider response envelope.

Only ``candidates[0].content.parts[0].text`` and
``candidates[0].groundingMetadata.groundingAttributions`` are read by the
pipeline. Every nesting level is optional so extraction has to look at each
level explicitly instead of chaining lookups; unknown provider fields are
ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger(__name__)


class _EnvelopeModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class ContentPart(_EnvelopeModel):
    text: Optional[str] = None


class CandidateContent(_EnvelopeModel):
    parts: List[ContentPart] = Field(default_factory=list)
    role: Optional[str] = None


class WebReference(_EnvelopeModel):
    uri: Optional[str] = None
    title: Optional[str] = None


class GroundingAttribution(_EnvelopeModel):
    web: Optional[WebReference] = None


class GroundingMetadata(_EnvelopeModel):
    grounding_attributions: List[GroundingAttribution] = Field(
        default_factory=list, alias="groundingAttributions"
    )


class Candidate(_EnvelopeModel):
    content: Optional[CandidateContent] = None
    grounding_metadata: Optional[GroundingMetadata] = Field(None, alias="groundingMetadata")
    finish_reason: Optional[str] = Field(None, alias="finishReason")


class ResponseEnvelope(_EnvelopeModel):
    candidates: List[Candidate] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "ResponseEnvelope":
        """Validate a decoded JSON body; unexpected shapes become an empty envelope."""
        if isinstance(payload, ResponseEnvelope):
            return payload
        if not isinstance(payload, Mapping):
            logger.warning(
                "Provider response is not a JSON object",
                payload_type=type(payload).__name__,
            )
            return cls()
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as e:
            logger.warning(
                "Provider response did not match the envelope shape",
                error_count=e.error_count(),
            )
            return cls()

    def first_candidate(self) -> Optional[Candidate]:
        return self.candidates[0] if self.candidates else None


__all__ = [
    "ContentPart",
    "CandidateContent",
    "WebReference",
    "GroundingAttribution",
    "GroundingMetadata",
    "Candidate",
    "ResponseEnvelope",
]
