"""I/O utilities for documents and JSON output.

orjson-backed JSON helpers shared by the CLI and tests.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import orjson


def read_document(path: Path) -> str:
    """Read a document as text, normalizing CRLF and CR line endings to LF."""
    raw = path.read_text(encoding="utf-8")
    return raw.replace("\r\n", "\n").replace("\r", "\n")


def dumps_json(obj: Any, *, pretty: bool = True) -> bytes:
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=opts)


def dump_json(obj: Any, *, pretty: bool = True) -> None:
    """Write JSON to stdout, newline terminated."""
    sys.stdout.flush()
    sys.stdout.buffer.write(dumps_json(obj, pretty=pretty))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj, pretty=pretty))


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())
