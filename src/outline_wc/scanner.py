"""Range scanner: the single source of truth for words in a slice of text."""
from __future__ import annotations

from collections.abc import Iterator

from outline_wc.classifier import classify
from outline_wc.markup import DEFAULT_MARKUP, MarkupConfig
from outline_wc.types import Region


def _resolve_range(text: str, begin: int, end: int | None) -> tuple[int, int]:
    if end is None:
        end = len(text)
    if begin < 0 or end < 0:
        raise ValueError(f"range offsets must be >= 0, got [{begin}, {end})")
    if begin > end:
        raise ValueError(f"range begin ({begin}) must be <= end ({end})")
    return min(begin, len(text)), min(end, len(text))


def iter_regions(
    text: str,
    begin: int = 0,
    end: int | None = None,
    *,
    markup: MarkupConfig = DEFAULT_MARKUP,
) -> Iterator[Region]:
    """Yield each classifier step from ``begin`` until the cursor reaches ``end``.

    Raises:
        UnterminatedBlockError: propagated from the classifier.
    """
    pos, end = _resolve_range(text, begin, end)
    while pos < end:
        region = classify(text, pos, end, markup=markup)
        yield region
        pos = region.end


def scan_range(
    text: str,
    begin: int = 0,
    end: int | None = None,
    *,
    markup: MarkupConfig | None = None,
) -> int:
    """Count words in ``text[begin:end]``, ignoring structural markup.

    Args:
        text: Full document text (structural context outside the range,
            such as the rest of a block, is still consulted).
        begin: Range start (inclusive).
        end: Range end (exclusive); None means end of text. Clamped to len(text).
        markup: Dialect configuration; defaults to Org mode markers.

    Returns:
        Non-negative word count. Empty ranges count 0.
    """
    return sum(
        region.words
        for region in iter_regions(text, begin, end, markup=markup or DEFAULT_MARKUP)
    )
