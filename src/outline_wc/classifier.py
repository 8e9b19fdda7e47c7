"""Region classifier: decide what starts at a cursor and how far to move.

``classify`` is a pure function of (text, cursor). Rules are tried in a
fixed precedence order and the first match wins:

    1. heading line    skip the whole line                 0 words
    2. block           skip through the close marker line  0 words (fatal if unclosed)
    3. comment line    skip the whole line                 0 words
    4. drawer          skip through the :END: line         0 words (falls through if unclosed)
    5. LaTeX macro     skip the invocation                 macro_weight words
    6. word            one word plus trailing separators   1 word
       (idle)          separators with no word in front    0 words

Every returned Region ends strictly after the cursor, so a driver loop
always terminates.
"""
from __future__ import annotations

import logging
import re

from outline_wc.markup import DEFAULT_MARKUP, CompiledMarkup, MarkupConfig, compile_markup
from outline_wc.types import (
    Err,
    Ok,
    Region,
    RegionKind,
    Result,
    UnterminatedBlockError,
    UnterminatedDrawer,
)

log = logging.getLogger(__name__)

_LEADING_WS_RE = re.compile(r"[ \t]*")


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------

def line_start(text: str, pos: int) -> int:
    return text.rfind("\n", 0, pos) + 1


def line_end(text: str, pos: int) -> int:
    """Offset of the newline ending the line at ``pos`` (or len(text))."""
    end = text.find("\n", pos)
    return len(text) if end < 0 else end


def next_line_start(text: str, pos: int) -> int:
    end = text.find("\n", pos)
    return len(text) if end < 0 else end + 1


def _in_leading_whitespace(text: str, start: int, pos: int) -> bool:
    return _LEADING_WS_RE.fullmatch(text, start, pos) is not None


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

def _block_end(text: str, pos: int, start: int, patterns: CompiledMarkup) -> int:
    """Offset just past the block close line. The search is unbounded."""
    close = patterns.block_close.search(text, next_line_start(text, pos))
    if close is None:
        raise UnterminatedBlockError(start, text[start:line_end(text, start)].strip())
    return next_line_start(text, close.start())


def _drawer_end(
    text: str,
    pos: int,
    start: int,
    name: str,
    limit: int,
    patterns: CompiledMarkup,
) -> Result[int, UnterminatedDrawer]:
    """Offset just past the drawer close line, searched up to ``limit``."""
    close = patterns.drawer_end.search(text, next_line_start(text, pos), limit)
    if close is None:
        return Err(UnterminatedDrawer(position=start, name=name))
    return Ok(next_line_start(text, close.start()))


def _macro_end(text: str, pos: int, limit: int, patterns: CompiledMarkup) -> int | None:
    """End of a macro invocation anchored one char before the cursor.

    The word step leaves the cursor just after a backslash, so the anchor
    sits one char back. A scan that begins on the backslash itself is
    matched at the cursor instead.
    """
    for anchor in (pos - 1, pos):
        if anchor < 0 or text[anchor] != "\\":
            continue
        m = patterns.macro.match(text, anchor, limit)
        if m is not None and m.end() > pos:
            return m.end()
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify(
    text: str,
    pos: int,
    limit: int | None = None,
    *,
    markup: MarkupConfig = DEFAULT_MARKUP,
) -> Region:
    """Classify the region starting at ``pos`` and return the step taken.

    Args:
        text: Full document text. Never modified.
        pos: Cursor offset, 0 <= pos < limit.
        limit: Scan bound (exclusive). Words and drawer searches never cross
            it; heading and block skips may. Defaults to len(text).
        markup: Dialect configuration.

    Returns:
        Region whose ``end`` is the new cursor and ``words`` its contribution.

    Raises:
        UnterminatedBlockError: A block opens at the cursor and never closes.
        ValueError: ``pos`` is outside [0, limit).
    """
    if limit is None:
        limit = len(text)
    limit = min(limit, len(text))
    if not 0 <= pos < limit:
        raise ValueError(f"cursor {pos} outside scan range [0, {limit})")

    patterns = compile_markup(markup)
    start = line_start(text, pos)
    end = line_end(text, pos)
    at_line_head = _in_leading_whitespace(text, start, pos)

    # 1. Heading line
    if patterns.heading.match(text, start, end):
        return Region(RegionKind.HEADING, pos, next_line_start(text, pos), 0)

    # 2. Block
    if at_line_head and patterns.block_open.match(text, start, end):
        return Region(RegionKind.BLOCK, pos, _block_end(text, pos, start, patterns), 0)

    # 3. Comment line
    if patterns.comment.match(text, start, end):
        return Region(RegionKind.COMMENT, pos, next_line_start(text, pos), 0)

    # 4. Drawer
    if at_line_head:
        drawer = patterns.drawer_open.match(text, start, end)
        if drawer is not None:
            match _drawer_end(text, pos, start, drawer.group(1), limit, patterns):
                case Ok(value=new_pos):
                    return Region(RegionKind.DRAWER, pos, new_pos, 0)
                case Err(error=e):
                    log.debug(
                        "Unterminated drawer %s at offset %d; counting as text",
                        e.name, e.position,
                    )

    # 5. LaTeX macro
    macro_end = _macro_end(text, pos, limit, patterns)
    if macro_end is not None:
        return Region(RegionKind.LATEX_MACRO, pos, macro_end, markup.macro_weight)

    # 6. Word (or idle separator run)
    m = patterns.word.match(text, pos, limit)
    if m is not None:
        return Region(RegionKind.WORD, pos, m.end(), 1)
    m = patterns.idle.match(text, pos, limit)
    assert m is not None and m.end() > pos
    return Region(RegionKind.OTHER, pos, m.end(), 0)
