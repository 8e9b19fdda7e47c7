"""Markup dialect configuration and compiled patterns.

The classifier never hard-codes markers: every heading, block, comment and
drawer pattern is derived from a MarkupConfig. The defaults describe Org
mode outlines; other outline dialects load their own config from JSON.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import orjson

DEFAULT_DRAWER_NAMES: tuple[str, ...] = ("PROPERTIES", "LOGBOOK", "CLOCK", "RESULTS")

# Backslash command, optional [options], one {argument} (argument discarded).
_MACRO_RE = re.compile(r"\\[A-Za-z]+(?:\[[^\]]*\])?\{[^}]*\}")

# One word plus its trailing separators, stopping after at most one newline
# so line-level rules get a chance on the following line.
_WORD_RE = re.compile(r"\w+[^\w\n]*\n?")

# Separator run with no word in front of it (indentation, bullets, blank lines).
_IDLE_RE = re.compile(r"[^\w\n]+\n?|\n")


@dataclass(frozen=True, slots=True)
class MarkupConfig:
    """Outline markup dialect injected into the classifier."""

    heading_char: str = "*"                      # Repeated at line start; count = depth
    block_open: str = "#+BEGIN"                  # Line prefix opening a fenced block
    block_close: str = "#+END"                   # Line prefix closing it
    comment_marker: str = "#"                    # Followed by space/tab or EOL
    drawer_names: tuple[str, ...] = DEFAULT_DRAWER_NAMES
    drawer_end: str = ":END:"
    macro_weight: int = 2                        # Words credited per LaTeX macro
    case_insensitive: bool = True                # Applies to block/drawer markers

    def __post_init__(self) -> None:
        if len(self.heading_char) != 1:
            raise ValueError(
                f"heading_char must be a single character, got {self.heading_char!r}"
            )
        for name in ("block_open", "block_close", "comment_marker", "drawer_end"):
            if not getattr(self, name):
                raise ValueError(f"{name} cannot be empty")
        if any(not n for n in self.drawer_names):
            raise ValueError("drawer_names cannot contain empty names")
        if self.macro_weight < 0:
            raise ValueError(f"macro_weight must be >= 0, got {self.macro_weight}")


DEFAULT_MARKUP = MarkupConfig()


@dataclass(frozen=True, slots=True)
class CompiledMarkup:
    """Regexes derived from a MarkupConfig."""

    config: MarkupConfig
    heading: re.Pattern[str]        # Multiline; group 1 markers, group 2 title
    block_open: re.Pattern[str]     # Matched at a line start, bounded by the line end
    block_close: re.Pattern[str]    # Multiline search
    comment: re.Pattern[str]        # Matched within one line's bounds
    drawer_open: re.Pattern[str]    # Matched within one line's bounds; group 1 name
    drawer_end: re.Pattern[str]     # Multiline search
    macro: re.Pattern[str]
    word: re.Pattern[str]
    idle: re.Pattern[str]


_COMPILED: dict[MarkupConfig, CompiledMarkup] = {}


def compile_markup(config: MarkupConfig = DEFAULT_MARKUP) -> CompiledMarkup:
    """Build (or fetch from cache) the patterns for a config."""
    cached = _COMPILED.get(config)
    if cached is not None:
        return cached

    fold = re.IGNORECASE if config.case_insensitive else 0
    names = "|".join(re.escape(n) for n in config.drawer_names) or "(?!)"
    compiled = CompiledMarkup(
        config=config,
        heading=re.compile(
            rf"^({re.escape(config.heading_char)}+)[ \t]+([^\n]*)$",
            re.MULTILINE,
        ),
        block_open=re.compile(rf"[ \t]*{re.escape(config.block_open)}", fold),
        block_close=re.compile(
            rf"^[ \t]*{re.escape(config.block_close)}", re.MULTILINE | fold,
        ),
        comment=re.compile(rf"[ \t]*{re.escape(config.comment_marker)}(?:[ \t]|$)"),
        drawer_open=re.compile(rf"[ \t]*:({names}):[ \t]*$", fold),
        drawer_end=re.compile(
            rf"^[ \t]*{re.escape(config.drawer_end)}[ \t]*$", re.MULTILINE | fold,
        ),
        macro=_MACRO_RE,
        word=_WORD_RE,
        idle=_IDLE_RE,
    )
    _COMPILED[config] = compiled
    return compiled


# ---------------------------------------------------------------------------
# JSON persistence
# ---------------------------------------------------------------------------

def markup_to_dict(config: MarkupConfig) -> dict[str, Any]:
    d = asdict(config)
    d["drawer_names"] = list(config.drawer_names)
    return d


def markup_from_dict(d: dict[str, Any]) -> MarkupConfig:
    """Create a MarkupConfig from a dict (e.g., loaded from JSON).

    Unknown keys (e.g. renderer settings) are ignored.
    """
    valid_fields = {f.name for f in fields(MarkupConfig)}
    converted: dict[str, Any] = {}
    for key, val in d.items():
        if key not in valid_fields:
            continue
        if key == "drawer_names":
            if isinstance(val, str) or not isinstance(val, (list, tuple)):
                raise ValueError(f"drawer_names must be a list of strings, got {val!r}")
            converted[key] = tuple(str(v) for v in val)
        elif key == "macro_weight":
            converted[key] = int(val)
        elif key == "case_insensitive":
            converted[key] = bool(val)
        else:
            converted[key] = str(val)
    return MarkupConfig(**converted)


def load_markup(path: Path) -> MarkupConfig:
    """Load a MarkupConfig from a JSON file."""
    payload = orjson.loads(path.read_bytes())
    if not isinstance(payload, dict):
        raise ValueError(f"Markup config must be a JSON object: {path}")
    return markup_from_dict(payload)


def save_markup(config: MarkupConfig, path: Path) -> None:
    """Save a MarkupConfig to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        orjson.dumps(
            markup_to_dict(config),
            option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS,
        )
    )
