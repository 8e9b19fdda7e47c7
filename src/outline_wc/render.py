"""Plain-text rendering of word counts.

Consumes aggregator output; the counting code never imports this module.
Formatting mirrors an editor overlay: a label at the end of each heading
line, optionally indented by depth and padded out to a target column.
"""
from __future__ import annotations

from collections.abc import Mapping

from outline_wc.aggregator import find_headings
from outline_wc.markup import DEFAULT_MARKUP, MarkupConfig


def status_message(count: int, scope: str) -> str:
    """One-line total, e.g. ``"42 words in region."``."""
    return f"{count} words in {scope}."


def format_annotation(
    count: int,
    depth: int = 1,
    *,
    prefix_width: int = 0,
    column: int = 80,
    indent_per_level: int = 0,
    fill: str = " ",
) -> str:
    """Label to append after a heading line of ``prefix_width`` chars.

    The label is right-aligned so it ends at ``column``, shifted left by
    ``indent_per_level`` per level below the top. When the heading line is
    already too long, a single fill char separates it from the label.
    """
    if len(fill) != 1:
        raise ValueError(f"fill must be a single character, got {fill!r}")
    label = str(count)
    target = column - indent_per_level * max(0, depth - 1)
    pad = max(1, target - prefix_width - len(label))
    return fill * pad + label


def annotate_outline(
    text: str,
    counts: Mapping[int, int],
    markup: MarkupConfig = DEFAULT_MARKUP,
    *,
    column: int = 80,
    indent_per_level: int = 0,
    fill: str = " ",
) -> list[str]:
    """Heading lines with their counts appended, in document order.

    Headings with no entry in ``counts`` are rendered without a label.
    """
    lines: list[str] = []
    for h in find_headings(text, markup):
        line = text[h.position:h.line_end].rstrip()
        count = counts.get(h.position)
        if count is None:
            lines.append(line)
            continue
        lines.append(line + format_annotation(
            count,
            h.depth,
            prefix_width=len(line),
            column=column,
            indent_per_level=indent_per_level,
            fill=fill,
        ))
    return lines
