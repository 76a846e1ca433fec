"""
Generation intents and typed results exchanged with the UI layer
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, FrozenSet, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Intent building blocks
# ---------------------------------------------------------------------------


class GenerationTool(str, Enum):
    """Augmentation capabilities the provider can be asked to use."""

    GOOGLE_SEARCH = "google_search"


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class BinaryAttachment(BaseModel):
    """A file already encoded by the caller (upload handling is out of scope)."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(..., min_length=1)
    # Never part of reprs or log lines
    base64_data: str = Field(..., min_length=1, repr=False)


class AttachmentPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["attachment"] = "attachment"
    attachment: BinaryAttachment
    # Instructional text sent right before the file
    instruction: str = (
        "The attached file provides additional context about the product and brand. "
        "Use it to inform the response."
    )


PromptPart = Annotated[Union[TextPart, AttachmentPart], Field(discriminator="kind")]


class GenerationIntent(BaseModel):
    """Everything needed to build one provider request.

    Immutable once built; construct a fresh one per call. Schema-constrained
    output and search grounding are mutually exclusive modes.
    """

    model_config = ConfigDict(frozen=True)

    prompt_parts: Tuple[PromptPart, ...]
    system_instruction: str = ""
    output_schema: Optional[Dict[str, Any]] = None
    tools: FrozenSet[GenerationTool] = frozenset()

    @model_validator(mode="after")
    def _check_modes(self) -> "GenerationIntent":
        if not self.prompt_parts:
            raise ValueError("A generation intent needs at least one prompt part")
        if self.output_schema is not None and self.grounded:
            raise ValueError("Search grounding cannot be combined with an output schema")
        return self

    @property
    def grounded(self) -> bool:
        return GenerationTool.GOOGLE_SEARCH in self.tools

    @property
    def structured(self) -> bool:
        return self.output_schema is not None

    @property
    def attachments(self) -> List[AttachmentPart]:
        return [p for p in self.prompt_parts if isinstance(p, AttachmentPart)]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class AdCopyVariant(BaseModel):
    """One ad copy concept returned by schema-constrained generation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    style: str = Field(
        ..., description="e.g., 'Short & Punchy', 'Emotional Story', 'Detailed Feature Set'"
    )
    headline: str = Field(..., description="A compelling headline for the ad.")
    body_copy: str = Field(
        ..., alias="bodyCopy", description="The main ad copy, concise and persuasive."
    )
    call_to_action: str = Field(
        ..., alias="callToAction", description="A strong, relevant call to action."
    )

    @field_validator("style", "headline", "body_copy", "call_to_action")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def to_clipboard_text(self) -> str:
        return f"Headline: {self.headline}\nBody: {self.body_copy}\nCTA: {self.call_to_action}"


class GroundingSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    title: str


class GroundedResult(BaseModel):
    """Free-text generation plus the web sources the provider cited."""

    model_config = ConfigDict(frozen=True)

    text: str
    sources: Tuple[GroundingSource, ...] = ()


# ---------------------------------------------------------------------------
# Form inputs of the two generation flows
# ---------------------------------------------------------------------------

MIN_VARIANTS = 1
MAX_VARIANTS = 5


class AdCopyBrief(BaseModel):
    """Inputs of the ad copy generator; defaults mirror the form defaults."""

    model_config = ConfigDict(frozen=True)

    product_name: str = "CargoWise"
    key_benefit: str = (
        "Enhanced operational efficiency through automation and real-time visibility "
        "across the supply chain, leading to better decision-making and simplified "
        "global compliance"
    )
    target_audience: str = "Logistics and Freight Forwarding Companies"
    tone: str = "Professional, trustworthy, and innovative"
    num_variants: int = 3
    attachment: Optional[BinaryAttachment] = None
    seed_insight: Optional[str] = None

    @field_validator("num_variants", mode="before")
    @classmethod
    def _clamp_variants(cls, value: Any) -> int:
        return max(MIN_VARIANTS, min(MAX_VARIANTS, int(value)))

    @model_validator(mode="after")
    def _check_required(self) -> "AdCopyBrief":
        if not self.product_name.strip() or not self.key_benefit.strip():
            raise ValueError("product_name and key_benefit are required")
        return self


class TrendAnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str = "Digital trends within the logistics industry"

    @field_validator("topic")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("topic is required")
        return value


__all__ = [
    "GenerationTool",
    "TextPart",
    "BinaryAttachment",
    "AttachmentPart",
    "PromptPart",
    "GenerationIntent",
    "AdCopyVariant",
    "GroundingSource",
    "GroundedResult",
    "AdCopyBrief",
    "TrendAnalysisRequest",
    "MIN_VARIANTS",
    "MAX_VARIANTS",
]
