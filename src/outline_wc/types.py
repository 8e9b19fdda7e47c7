"""Core types for outline word counting.

All offsets are global char offsets into the document text (never
line-relative). All dataclasses use slots=True.

Type hierarchy:
  Ok[T] / Err[E]          Result type for recoverable classifier outcomes
  RegionKind              What a classified span of text is
  Region                  One classifier step: kind, span, word contribution
  Heading                 A heading line with its depth
  SubtreeRange            Half-open [begin, end) span of a heading's subtree
  SubtreeCount            Heading + range + word count (aggregator output)
  UnterminatedBlockError  Fatal: block open marker with no close marker
  UnterminatedDrawer      Recoverable: drawer open marker with no close marker
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E]."""
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E].

    Keeps the typed failure reason so a caller can log why a match fell
    through instead of receiving a bare None.
    """
    error: E


Result = Union[Ok[T], Err[E]]


# ---------------------------------------------------------------------------
# Regions
# ---------------------------------------------------------------------------

class RegionKind(str, Enum):
    HEADING = "heading"
    BLOCK = "block"
    COMMENT = "comment"
    DRAWER = "drawer"
    LATEX_MACRO = "latex_macro"
    WORD = "word"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Region:
    """A classified span: the cursor moves from ``start`` to ``end``.

    Invariants (enforced in __post_init__):
        - start >= 0
        - end > start (every step makes progress)
        - words >= 0
    """
    kind: RegionKind
    start: int      # Cursor position the classifier was applied at
    end: int        # New cursor position (exclusive)
    words: int      # Contribution to the word count

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Region.start must be >= 0, got {self.start}")
        if self.end <= self.start:
            raise ValueError(
                f"Region.end ({self.end}) must be > start ({self.start})"
            )
        if self.words < 0:
            raise ValueError(f"Region.words must be >= 0, got {self.words}")


# ---------------------------------------------------------------------------
# Outline structure
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Heading:
    """A heading line (e.g. ``** Methods``)."""
    position: int   # Offset of the first marker char (line start)
    depth: int      # Number of leading marker chars
    title: str      # Heading text without markers, stripped
    line_end: int   # Offset of the terminating newline (or len(text))

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError(f"Heading.position must be >= 0, got {self.position}")
        if self.depth < 1:
            raise ValueError(f"Heading.depth must be >= 1, got {self.depth}")


@dataclass(frozen=True, slots=True)
class SubtreeRange:
    """Half-open span [begin, end) covering a heading and its descendants."""
    begin: int
    end: int

    def __post_init__(self) -> None:
        if self.begin < 0:
            raise ValueError(f"SubtreeRange.begin must be >= 0, got {self.begin}")
        if self.end < self.begin:
            raise ValueError(
                f"SubtreeRange.end ({self.end}) must be >= begin ({self.begin})"
            )

    def contains(self, other: SubtreeRange) -> bool:
        return self.begin <= other.begin and other.end <= self.end


@dataclass(frozen=True, slots=True)
class SubtreeCount:
    heading: Heading
    span: SubtreeRange
    words: int


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class UnterminatedBlockError(ValueError):
    """A block open marker has no matching close marker before end of text.

    Fatal: aborts the scan (and any aggregation pass running it).
    """

    def __init__(self, position: int, marker: str) -> None:
        self.position = position
        self.marker = marker
        super().__init__(
            f"Unterminated block at offset {position}: {marker!r} has no closing marker"
        )


@dataclass(frozen=True, slots=True)
class UnterminatedDrawer:
    """A drawer open line with no close line before the scan limit."""
    position: int   # Offset of the drawer open line
    name: str       # Drawer name, e.g. "PROPERTIES"
