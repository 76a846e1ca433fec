"""
Generation Request Builder
--------------------------
Turns a :class:`GenerationIntent` into the provider's ``generateContent``
payload. Pure functions, no I/O; the intent is never mutated.

Also hosts the prompt factories of the two generation flows (ad copy and
marketing trend analysis).
"""

from __future__ import annotations

import copy
from functools import lru_cache
from typing import Any, Dict, List, Optional

import structlog
from pydantic import TypeAdapter

from marketing_toolkit.models.generation import (
    AdCopyBrief,
    AdCopyVariant,
    AttachmentPart,
    GenerationIntent,
    GenerationTool,
    TextPart,
    TrendAnalysisRequest,
)

logger = structlog.get_logger(__name__)

ProviderPayload = Dict[str, Any]

AD_COPY_SYSTEM_PROMPT = (
    "You are a world-class advertising copywriter specializing in highly effective A/B "
    "tested ad concepts. Your task is to analyse the product details and generate exactly "
    "the requested number of distinct ad copy variants in the provided JSON format. "
    "**Crucially, all responses must be in Australian English.**"
)

TREND_ANALYSIS_SYSTEM_PROMPT = (
    "You are a professional market research analyst. You must use the Google Search tool "
    "to find current, real-time information. Provide a single, well-structured, "
    "easy-to-read summary that converts the research into marketing strategy "
    "recommendations. The output must be formatted using Markdown. Start with a bolded "
    "heading like '**Executive Summary**', followed by a **'Key Strategic Insights'** "
    "section with a bulleted list where every item starts with '* ' and opens with a "
    "label such as 'Action / Insight:'. Use bolding (**) for key terms. "
    "**Crucially, all responses must be in Australian English.**"
)


# ────────────────────────────────────────────────────────────
#  Payload construction
# ────────────────────────────────────────────────────────────
def build(intent: GenerationIntent) -> ProviderPayload:
    """Render the provider payload for ``intent``.

    Attachments, each preceded by its instruction text, are placed before the
    caller's text parts; text parts keep their supplied order.
    """
    parts: List[Dict[str, Any]] = []
    for part in intent.prompt_parts:
        if isinstance(part, AttachmentPart):
            parts.append({"text": part.instruction})
            parts.append(
                {
                    "inlineData": {
                        "mimeType": part.attachment.mime_type,
                        "data": part.attachment.base64_data,
                    }
                }
            )
    for part in intent.prompt_parts:
        if isinstance(part, TextPart):
            parts.append({"text": part.text})

    payload: ProviderPayload = {"contents": [{"parts": parts}]}
    if intent.system_instruction:
        payload["systemInstruction"] = {"parts": [{"text": intent.system_instruction}]}

    if intent.grounded:
        payload["tools"] = [{GenerationTool.GOOGLE_SEARCH.value: {}}]
    elif intent.output_schema is not None:
        payload["generationConfig"] = {
            "responseMimeType": "application/json",
            "responseSchema": copy.deepcopy(intent.output_schema),
        }

    # Counts and flags only; attachment bytes must never reach the logs
    logger.debug(
        "Built generation payload",
        part_count=len(parts),
        attachment_count=len(intent.attachments),
        structured=intent.structured,
        grounded=intent.grounded,
    )
    return payload


# ────────────────────────────────────────────────────────────
#  Output schemas
# ────────────────────────────────────────────────────────────
def to_provider_schema(json_schema: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a pydantic JSON schema into the provider's ``responseSchema`` dialect.

    ``$ref``s are inlined, only type/description/enum/properties/required/items
    are kept, and type names are upper-cased (``ARRAY``, ``OBJECT``, ``STRING``).
    """
    defs = json_schema.get("$defs", {})

    def simplify(schema: Dict[str, Any]) -> Dict[str, Any]:
        ref = schema.get("$ref")
        if isinstance(ref, str) and ref.startswith("#/$defs/"):
            target = defs.get(ref[len("#/$defs/"):])
            if target is not None:
                return simplify(target)
            return {"type": "OBJECT"}

        result: Dict[str, Any] = {}
        if "type" in schema:
            result["type"] = str(schema["type"]).upper()
        if "description" in schema:
            result["description"] = schema["description"]
        if "enum" in schema:
            result["enum"] = list(schema["enum"])
        if "properties" in schema:
            result["properties"] = {
                name: simplify(sub) for name, sub in schema["properties"].items()
            }
        if "required" in schema:
            result["required"] = list(schema["required"])
        if "items" in schema:
            result["items"] = simplify(schema["items"])
        return result

    return simplify(json_schema)


@lru_cache(maxsize=1)
def _ad_copy_schema() -> Dict[str, Any]:
    return to_provider_schema(
        TypeAdapter(List[AdCopyVariant]).json_schema(by_alias=True)
    )


def ad_copy_response_schema() -> Dict[str, Any]:
    """Schema for an array of ad copy variants; a fresh copy on every call."""
    return copy.deepcopy(_ad_copy_schema())


# ────────────────────────────────────────────────────────────
#  Prompt factories
# ────────────────────────────────────────────────────────────
def ad_copy_prompt(brief: AdCopyBrief) -> str:
    prompt = (
        f"Generate exactly {brief.num_variants} distinct ad copy variants for the following "
        "product. Ensure the copy is highly persuasive and suitable for social media ads "
        "(Facebook/Instagram/X).\n"
        f"  - Product Name: {brief.product_name}\n"
        f"  - Key Benefit: {brief.key_benefit}\n"
        f"  - Target Audience: {brief.target_audience}\n"
        f"  - Tone: {brief.tone}\n"
    )
    if brief.seed_insight:
        prompt += f"  - Strategic Insight to build on: {brief.seed_insight}\n"
    prompt += (
        "\nThe variants should be distinct from each other, using different styles, tones, "
        "or focuses (e.g., Short & Punchy, Emotional Story, Detailed Feature Set)."
    )
    return prompt


def ad_copy_intent(brief: AdCopyBrief) -> GenerationIntent:
    parts: List[Any] = []
    if brief.attachment is not None:
        parts.append(AttachmentPart(attachment=brief.attachment))
    parts.append(TextPart(text=ad_copy_prompt(brief)))
    return GenerationIntent(
        prompt_parts=tuple(parts),
        system_instruction=AD_COPY_SYSTEM_PROMPT,
        output_schema=ad_copy_response_schema(),
    )


def trend_analysis_prompt(request: TrendAnalysisRequest) -> str:
    return (
        f'Find recent news, trends, and articles about "{request.topic}". Synthesize the '
        "findings into a concise, actionable marketing strategy summary. Highlight 3 key "
        "insights."
    )


def trend_analysis_intent(
    request: Optional[TrendAnalysisRequest] = None,
) -> GenerationIntent:
    request = request or TrendAnalysisRequest()
    return GenerationIntent(
        prompt_parts=(TextPart(text=trend_analysis_prompt(request)),),
        system_instruction=TREND_ANALYSIS_SYSTEM_PROMPT,
        tools=frozenset({GenerationTool.GOOGLE_SEARCH}),
    )


__all__ = [
    "ProviderPayload",
    "AD_COPY_SYSTEM_PROMPT",
    "TREND_ANALYSIS_SYSTEM_PROMPT",
    "build",
    "to_provider_schema",
    "ad_copy_response_schema",
    "ad_copy_prompt",
    "ad_copy_intent",
    "trend_analysis_prompt",
    "trend_analysis_intent",
]
