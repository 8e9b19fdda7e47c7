"""Annotation store: last computed subtree word count per heading.

Keys are heading positions (char offset of the heading line). The store is a
snapshot; an aggregation pass clears it before writing, and renderers only
read from it.
"""
from __future__ import annotations

import threading
from collections.abc import Mapping


class AnnotationStore:
    """Heading position -> subtree word count."""

    def __init__(self) -> None:
        self._counts: dict[int, int] = {}
        self._lock = threading.Lock()

    def put(self, heading_id: int, count: int) -> None:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        with self._lock:
            self._counts[heading_id] = count

    def update(self, counts: Mapping[int, int]) -> None:
        """Bulk write, used by an aggregation pass once every count is known."""
        if any(c < 0 for c in counts.values()):
            raise ValueError("counts must be >= 0")
        with self._lock:
            self._counts.update(counts)

    def get(self, heading_id: int) -> int | None:
        with self._lock:
            return self._counts.get(heading_id)

    def clear(self) -> None:
        with self._lock:
            self._counts.clear()

    def items(self) -> list[tuple[int, int]]:
        """Snapshot of (heading position, count) pairs in document order."""
        with self._lock:
            return sorted(self._counts.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

    def __contains__(self, heading_id: object) -> bool:
        with self._lock:
            return heading_id in self._counts
