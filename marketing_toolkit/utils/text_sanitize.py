"""
Shared text sanitation utilities for prompt seeding.

- strip_markdown: drop heading/list/emphasis markers from generated markdown
- collapse_ws: collapse consecutive whitespace
"""

from __future__ import annotations

import re as _re

__all__ = ["strip_markdown", "collapse_ws"]

_LINE_PREFIX = _re.compile(r"^\s*(?:#+|\*(?=\s)|-(?=\s)|\d+\.(?=\s))\s*")
_EMPHASIS = _re.compile(r"\*{1,2}")


def collapse_ws(text: str) -> str:
    if not text:
        return ""
    return _re.sub(r"\s+", " ", str(text)).strip()


def strip_markdown(text: str) -> str:
    """Plain text of a markdown snippet, one space between former lines."""
    if not text:
        return ""
    lines = [_LINE_PREFIX.sub("", line) for line in str(text).splitlines()]
    return collapse_ws(_EMPHASIS.sub("", " ".join(lines)))
