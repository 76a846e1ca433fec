"""
Models package for the generation pipeline
"""

from marketing_toolkit.models.generation import (
    GenerationTool,
    TextPart,
    BinaryAttachment,
    AttachmentPart,
    PromptPart,
    GenerationIntent,
    AdCopyVariant,
    GroundingSource,
    GroundedResult,
    AdCopyBrief,
    TrendAnalysisRequest,
)

from marketing_toolkit.models.envelope import (
    Candidate,
    ResponseEnvelope,
)

from marketing_toolkit.models.blocks import (
    Heading,
    LabeledLine,
    Paragraph,
    Spacer,
    MarkdownBlock,
    InsightKind,
    InsightUnit,
)

__all__ = [
    # Intents and results
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
    # Provider envelope
    "Candidate",
    "ResponseEnvelope",
    # Markdown blocks
    "Heading",
    "LabeledLine",
    "Paragraph",
    "Spacer",
    "MarkdownBlock",
    "InsightKind",
    "InsightUnit",
]
