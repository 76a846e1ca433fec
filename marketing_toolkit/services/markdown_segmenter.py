"""
Markdown Block Segmenter
------------------------
Classifies every line of a generated markdown document into a renderable
block, and slices trend-analysis documents into forwardable insight units.

``segment`` is a pure fold over lines: it never raises, and anything it does
not recognise degrades into a :class:`Paragraph`.

Line classification, first match wins:

1. ``#``-prefixed line, or a line fully wrapped in one ``**`` pair -> Heading
2. line (optionally list-marked) opening with a marketing label  -> LabeledLine
3. any other non-blank line                                      -> Paragraph
4. blank line                                                    -> Spacer
"""

from __future__ import annotations

import html
import re
from typing import Iterable, List, Optional, Sequence, Tuple

import structlog

from marketing_toolkit.models.blocks import (
    Heading,
    InsightKind,
    InsightUnit,
    LabeledLine,
    MarkdownBlock,
    Paragraph,
    Spacer,
)

logger = structlog.get_logger(__name__)

MAX_HEADING_LEVEL = 4
BOLD_HEADING_LEVEL = 4

EXECUTIVE_SUMMARY_HEADER = "executive summary"
KEY_INSIGHTS_HEADER = "key strategic insights"

_ATX_HEADING = re.compile(r"^(#+)\s*(.*)$")
_BOLD_LINE = re.compile(r"^\*\*(?!\*)(.+)\*\*$")
_LIST_ITEM = re.compile(r"^(\*|-|\d+\.)\s+(.*)$")
_STAR_RUN = re.compile(r"(\*+)")
_INLINE_TAGS = {1: "em", 2: "strong"}

# Canonical label -> pattern; combined forms first so they win over their prefixes
_LABELS: Tuple[Tuple[str, str], ...] = (
    ("Action / Insight:", r"action\s*/\s*insight"),
    ("Recommendation / Marketing Strategy:", r"recommendation\s*/\s*marketing\s+strategy"),
    ("Marketing Strategy:", r"marketing\s+strategy"),
    ("Recommendation:", r"recommendation"),
    ("Action:", r"action"),
    ("Insight:", r"insight"),
)
_LABEL_PATTERNS = tuple(
    (
        label,
        re.compile(
            rf"^(?:\*\*{pattern}\s*(?:\*\*\s*:|:\s*\*\*)|{pattern}\s*:)\s*(?P<rest>.*)$",
            re.IGNORECASE,
        ),
    )
    for label, pattern in _LABELS
)


# ────────────────────────────────────────────────────────────
#  Inline formatting
# ────────────────────────────────────────────────────────────
def format_inline(text: str) -> str:
    """HTML-escape ``text`` and turn ``**x**`` / ``*x*`` into strong/em markup.

    Star runs are paired with a stack scan, so emitted tags always nest. A
    closing run matches the nearest open marker of the same width; markers
    opened after it and never closed, and any unpaired run, stay literal.
    A ``***`` run opens em then strong, or closes whatever it can.
    """
    out: List[str] = []
    # (marker width, slot in ``out`` holding the opener)
    opened: List[Tuple[int, int]] = []

    def push(width: int) -> None:
        opened.append((width, len(out)))
        out.append("*" * width)

    def close() -> None:
        width, slot = opened.pop()
        tag = _INLINE_TAGS[width]
        out[slot] = f"<{tag}>"
        out.append(f"</{tag}>")

    for i, piece in enumerate(_STAR_RUN.split(text)):
        if i % 2 == 0:
            out.append(html.escape(piece, quote=False))
            continue

        run = len(piece)
        if run > 3:
            out.append("*" * (run - 3))
            run = 3

        if run == 3:
            while opened and opened[-1][0] <= run:
                run -= opened[-1][0]
                close()
            if run == 3:
                push(1)
                push(2)
            elif run:
                push(run)
            continue

        match = next(
            (j for j in range(len(opened) - 1, -1, -1) if opened[j][0] == run), None
        )
        if match is None:
            push(run)
        else:
            del opened[match + 1:]
            close()

    return "".join(out)


def inline_to_markdown(fragment: str) -> str:
    """Inverse of :func:`format_inline`."""
    text = fragment.replace("<strong>", "**").replace("</strong>", "**")
    text = text.replace("<em>", "*").replace("</em>", "*")
    return html.unescape(text)


# ────────────────────────────────────────────────────────────
#  Line classification
# ────────────────────────────────────────────────────────────
def _heading(trimmed: str) -> Optional[Heading]:
    if trimmed.startswith("#"):
        match = _ATX_HEADING.match(trimmed)
        hashes, rest = match.group(1), match.group(2)
        level = min(len(hashes), MAX_HEADING_LEVEL)
        return Heading(level=level, html=format_inline(rest.strip()))

    match = _BOLD_LINE.match(trimmed)
    if match and "**" not in match.group(1) and match.group(1).strip():
        return Heading(level=BOLD_HEADING_LEVEL, html=format_inline(match.group(1).strip()))
    return None


def _split_marker(trimmed: str) -> Tuple[str, str]:
    match = _LIST_ITEM.match(trimmed)
    if match:
        return match.group(1), match.group(2).strip()
    return "", trimmed


def _labeled(body: str, marker: str) -> Optional[LabeledLine]:
    for label, pattern in _LABEL_PATTERNS:
        match = pattern.match(body)
        if match:
            return LabeledLine(
                label=label,
                html=format_inline(match.group("rest").strip()),
                marker=marker,
            )
    return None


def classify_line(line: str) -> MarkdownBlock:
    trimmed = line.strip()
    if not trimmed:
        return Spacer()

    heading = _heading(trimmed)
    if heading is not None:
        return heading

    marker, body = _split_marker(trimmed)
    labeled = _labeled(body, marker)
    if labeled is not None:
        return labeled

    return Paragraph(html=format_inline(body), marker=marker)


def segment(markdown_text: str) -> List[MarkdownBlock]:
    """Split ``markdown_text`` into one block per line. Total; never raises."""
    if not markdown_text:
        return []
    return [classify_line(line) for line in str(markdown_text).splitlines()]


# ────────────────────────────────────────────────────────────
#  Reconstruction and rendering
# ────────────────────────────────────────────────────────────
def _block_markdown(block: MarkdownBlock) -> str:
    if isinstance(block, Heading):
        text = inline_to_markdown(block.html)
        return "#" * block.level + (f" {text}" if text else "")
    if isinstance(block, LabeledLine):
        parts = [block.marker, block.label, inline_to_markdown(block.html)]
        return " ".join(p for p in parts if p)
    if isinstance(block, Paragraph):
        text = inline_to_markdown(block.html)
        return f"{block.marker} {text}" if block.marker else text
    return ""


def reconstruct(blocks: Iterable[MarkdownBlock]) -> str:
    """Markdown that segments back into an equivalent block sequence."""
    return "".join(_block_markdown(block) + "\n" for block in blocks)


def _block_html(block: MarkdownBlock) -> str:
    if isinstance(block, Heading):
        return f"<h{block.level}>{block.html}</h{block.level}>"
    if isinstance(block, LabeledLine):
        label = f"<strong>{html.escape(block.label, quote=False)}</strong>"
        return f"{label} {block.html}" if block.html else label
    if isinstance(block, Paragraph):
        return block.html
    return ""


def render_html(blocks: Sequence[MarkdownBlock]) -> str:
    """Render blocks as an HTML fragment; list-marked lines are grouped into ``<ul>``."""
    out: List[str] = []
    items: List[str] = []

    def flush() -> None:
        if items:
            out.append("<ul>" + "".join(f"<li>{i}</li>" for i in items) + "</ul>")
            items.clear()

    for block in blocks:
        marker = getattr(block, "marker", "")
        if marker:
            items.append(_block_html(block))
            continue
        flush()
        if isinstance(block, Spacer):
            out.append('<div class="spacer"></div>')
        elif isinstance(block, Heading):
            out.append(_block_html(block))
        else:
            out.append(f"<p>{_block_html(block)}</p>")
    flush()
    return "\n".join(out)


# ────────────────────────────────────────────────────────────
#  Insight splitting
# ────────────────────────────────────────────────────────────
def _header_key(line: str) -> str:
    """Lower-cased header text with ``#``/``**`` decoration and trailing colon removed."""
    text = line.strip()
    if text.startswith("* "):
        return ""
    text = text.lstrip("#").strip()
    text = text.strip("*").strip().rstrip(":").strip("*").strip()
    return text.lower()


def split_into_insights(markdown_text: str) -> List[InsightUnit]:
    """Slice an analysis document into an optional lead-in plus one unit per bullet.

    Expects the "Executive Summary ... Key Strategic Insights ... * bullet" layout.
    Without a "Key Strategic Insights" header no units are produced.
    """
    lines = (markdown_text or "").splitlines()
    header_idx = next(
        (i for i, line in enumerate(lines) if _header_key(line) == KEY_INSIGHTS_HEADER),
        None,
    )
    if header_idx is None:
        logger.debug("No Key Strategic Insights header; no insight units produced")
        return []

    units: List[InsightUnit] = []

    lead = lines[:header_idx]
    summary_idx = next(
        (i for i, line in enumerate(lead) if _header_key(line) == EXECUTIVE_SUMMARY_HEADER),
        None,
    )
    if summary_idx is not None:
        lead_text = "\n".join(lead[summary_idx + 1:]).strip()
        if lead_text:
            units.append(InsightUnit(kind=InsightKind.LEAD_IN, index=0, markdown=lead_text))

    segments: List[List[str]] = [[]]
    for line in lines[header_idx + 1:]:
        trimmed = line.strip()
        if trimmed.startswith("*"):
            segments.append([trimmed])
        else:
            segments[-1].append(line)

    for lines_of_segment in segments:
        text = "\n".join(lines_of_segment).strip()
        if text:
            units.append(
                InsightUnit(kind=InsightKind.INSIGHT, index=len(units), markdown=text)
            )

    logger.debug("Split analysis into insight units", unit_count=len(units))
    return units


def insight_blocks(unit: InsightUnit) -> List[MarkdownBlock]:
    """Renderable blocks of one insight unit."""
    return segment(unit.markdown)


__all__ = [
    "format_inline",
    "inline_to_markdown",
    "classify_line",
    "segment",
    "reconstruct",
    "render_html",
    "split_into_insights",
    "insight_blocks",
]
