"""
Renderable blocks and insight units produced from generated markdown
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from marketing_toolkit.utils.text_sanitize import strip_markdown


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class Heading(_Block):
    kind: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=4)
    html: str = ""


class LabeledLine(_Block):
    """A line opening with one of the marketing-insight labels."""

    kind: Literal["labeled_line"] = "labeled_line"
    label: str
    html: str = ""
    # List marker stripped from the line ("*", "-", "1."), empty when none
    marker: str = ""


class Paragraph(_Block):
    kind: Literal["paragraph"] = "paragraph"
    html: str
    marker: str = ""


class Spacer(_Block):
    kind: Literal["spacer"] = "spacer"


MarkdownBlock = Annotated[
    Union[Heading, LabeledLine, Paragraph, Spacer], Field(discriminator="kind")
]


class InsightKind(str, Enum):
    LEAD_IN = "lead_in"
    INSIGHT = "insight"


class InsightUnit(BaseModel):
    """An independently forwardable slice of an analysis document."""

    model_config = ConfigDict(frozen=True)

    kind: InsightKind
    index: int = Field(..., ge=0)
    markdown: str

    def plain_text(self) -> str:
        """Markdown-free text, used when the unit seeds another generation."""
        return strip_markdown(self.markdown)


__all__ = [
    "Heading",
    "LabeledLine",
    "Paragraph",
    "Spacer",
    "MarkdownBlock",
    "InsightKind",
    "InsightUnit",
]
