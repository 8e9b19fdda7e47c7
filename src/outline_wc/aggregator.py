"""Subtree aggregator: per-heading word counts across an outline.

Each heading's subtree runs from its own line up to (not including) the
next heading of equal or shallower depth, or to end of text. Counts are
obtained by scanning that raw range, so a parent's count includes every
descendant's body without summing child results.

2-phase approach:
    1. Find headings in document order.
    2. Walk them last to first with a monotonic stack to resolve ranges,
       scanning each range as it is resolved.
"""
from __future__ import annotations

import logging

from outline_wc.annotations import AnnotationStore
from outline_wc.markup import DEFAULT_MARKUP, MarkupConfig, compile_markup
from outline_wc.scanner import scan_range
from outline_wc.types import Heading, SubtreeCount, SubtreeRange

log = logging.getLogger(__name__)


def find_headings(text: str, markup: MarkupConfig = DEFAULT_MARKUP) -> list[Heading]:
    """Find every heading line, in document order."""
    if not text:
        return []
    pattern = compile_markup(markup).heading
    return [
        Heading(
            position=m.start(),
            depth=len(m.group(1)),
            title=m.group(2).strip(),
            line_end=m.end(),
        )
        for m in pattern.finditer(text)
    ]


def subtree_ranges(text: str, headings: list[Heading]) -> list[SubtreeRange]:
    """Compute each heading's subtree range, aligned with ``headings``.

    Walks headings in reverse. The stack holds later headings that can still
    end an earlier subtree; anything deeper than the current heading can
    never end a subtree starting before it, so it is popped for good.
    """
    ranges: list[SubtreeRange | None] = [None] * len(headings)
    stack: list[Heading] = []
    for idx in range(len(headings) - 1, -1, -1):
        h = headings[idx]
        while stack and stack[-1].depth > h.depth:
            stack.pop()
        end = stack[-1].position if stack else len(text)
        ranges[idx] = SubtreeRange(begin=h.position, end=end)
        stack.append(h)
    return [r for r in ranges if r is not None]


def outline_counts(
    text: str,
    markup: MarkupConfig = DEFAULT_MARKUP,
) -> list[SubtreeCount]:
    """Heading, subtree range and word count for every heading, in document order.

    Raises:
        UnterminatedBlockError: any subtree contains an unclosed block. The
            whole pass fails; no partial result is returned.
    """
    headings = find_headings(text, markup)
    ranges = subtree_ranges(text, headings)
    rows: list[SubtreeCount] = []
    for h, span in zip(reversed(headings), reversed(ranges), strict=True):
        words = scan_range(text, span.begin, span.end, markup=markup)
        log.debug(
            "Heading depth=%d at %d: range [%d, %d) -> %d words",
            h.depth, h.position, span.begin, span.end, words,
        )
        rows.append(SubtreeCount(heading=h, span=span, words=words))
    rows.reverse()
    return rows


def aggregate_subtrees(
    text: str,
    *,
    markup: MarkupConfig | None = None,
    store: AnnotationStore | None = None,
) -> dict[int, int]:
    """Map each heading position to the word count of its subtree.

    Args:
        text: Full document text.
        markup: Dialect configuration; defaults to Org mode markers.
        store: Optional annotation store. It is cleared first and filled only
            once every subtree has been counted.

    Returns:
        Dict of heading position -> subtree word count.

    Raises:
        UnterminatedBlockError: propagated from the scanner; ``store`` is left
            empty.
    """
    if store is not None:
        store.clear()
    rows = outline_counts(text, markup or DEFAULT_MARKUP)
    counts = {row.heading.position: row.words for row in rows}
    if store is not None:
        store.update(counts)
    log.debug("Aggregated %d headings", len(counts))
    return counts
