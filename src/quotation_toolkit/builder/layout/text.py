"""
Module: builder.layout.text

Purpose:
    Wrap free text to a column width using ReportLab font metrics.
    Explicit newlines start a new line; blank lines are kept.

Key Functions:
    - wrap_text(): Text -> list of lines fitting a width in mm
    - text_height(): Height of N wrapped lines

Dependencies:
    - reportlab.lib.utils.simpleSplit

Used By:
    - builder.layout.composer: Recipient, subject, terms, footer
"""

from __future__ import annotations

from typing import List

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit


def wrap_text(text: str, font: str, size: float, width: float) -> List[str]:
    """
    Split text into lines no wider than `width` mm.

    Args:
        text: Text to wrap (may contain newlines)
        font: ReportLab font name used for measuring
        size: Font size in points
        width: Column width in mm

    Returns:
        Wrapped lines; empty text gives an empty list

    Example:
        >>> wrap_text("Line one\\nLine two", "Helvetica", 9, 180)
        ['Line one', 'Line two']
    """
    if not text:
        return []

    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines: List[str] = []
    for paragraph in normalized.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(simpleSplit(paragraph, font, size, width * mm) or [""])
    return lines


def text_height(line_count: int, line_height: float) -> float:
    """Height in mm of `line_count` lines."""
    return max(0, line_count) * line_height
