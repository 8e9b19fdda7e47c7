"""Tests for outline_wc.aggregator module."""
import pytest

from outline_wc.aggregator import (
    aggregate_subtrees,
    find_headings,
    outline_counts,
    subtree_ranges,
)
from outline_wc.annotations import AnnotationStore
from outline_wc.markup import MarkupConfig
from outline_wc.scanner import scan_range
from outline_wc.types import Heading, UnterminatedBlockError


NESTED_TEXT = "* A\na\n** B\nb\n*** C\nc\n** D\nd\n* E\ne\n"


def _by_title(text: str, counts: dict[int, int]) -> dict[str, int]:
    return {h.title: counts[h.position] for h in find_headings(text)}


class TestFindHeadings:
    def test_depth_and_title(self) -> None:
        headings = find_headings("intro\n** Methods  \nbody\n")
        assert headings == [Heading(position=6, depth=2, title="Methods", line_end=18)]

    def test_document_order(self) -> None:
        positions = [h.position for h in find_headings(NESTED_TEXT)]
        assert positions == sorted(positions)
        assert [h.depth for h in find_headings(NESTED_TEXT)] == [1, 2, 3, 2, 1]

    def test_bold_text_is_not_heading(self) -> None:
        assert find_headings("*bold* start\n") == []

    def test_empty_text(self) -> None:
        assert find_headings("") == []


class TestSubtreeRanges:
    def test_ranges_end_at_next_shallower_or_equal(self) -> None:
        headings = find_headings(NESTED_TEXT)
        ranges = subtree_ranges(NESTED_TEXT, headings)
        ends = {h.title: r.end for h, r in zip(headings, ranges)}
        assert ends["A"] == NESTED_TEXT.index("* E")
        assert ends["B"] == NESTED_TEXT.index("** D")
        assert ends["C"] == NESTED_TEXT.index("** D")
        assert ends["D"] == NESTED_TEXT.index("* E")
        assert ends["E"] == len(NESTED_TEXT)

    def test_ranges_nest_or_are_disjoint(self) -> None:
        ranges = subtree_ranges(NESTED_TEXT, find_headings(NESTED_TEXT))
        for a in ranges:
            for b in ranges:
                nested = a.contains(b) or b.contains(a)
                disjoint = a.end <= b.begin or b.end <= a.begin
                assert nested or disjoint

    def test_no_headings(self) -> None:
        assert subtree_ranges("plain", []) == []


class TestAggregateSubtrees:
    def test_parent_includes_child_body(self) -> None:
        text = "* A\nalpha beta\n** B\ngamma\n"
        counts = aggregate_subtrees(text)
        assert counts == {0: 3, text.index("** B"): 1}

    def test_nested_outline(self) -> None:
        counts = aggregate_subtrees(NESTED_TEXT)
        assert _by_title(NESTED_TEXT, counts) == {"A": 4, "B": 2, "C": 1, "D": 1, "E": 1}

    def test_siblings(self) -> None:
        text = "* A\none\n* B\ntwo three\n"
        assert _by_title(text, aggregate_subtrees(text)) == {"A": 1, "B": 2}

    def test_preamble_not_attributed(self) -> None:
        text = "preamble words here\n* A\nbody\n"
        assert aggregate_subtrees(text) == {text.index("* A"): 1}

    def test_no_headings(self) -> None:
        assert aggregate_subtrees("") == {}
        assert aggregate_subtrees("just prose") == {}

    def test_idempotent(self) -> None:
        assert aggregate_subtrees(NESTED_TEXT) == aggregate_subtrees(NESTED_TEXT)

    def test_matches_independent_range_scans(self) -> None:
        counts = aggregate_subtrees(NESTED_TEXT)
        headings = find_headings(NESTED_TEXT)
        for h, r in zip(headings, subtree_ranges(NESTED_TEXT, headings)):
            assert counts[h.position] == scan_range(NESTED_TEXT, r.begin, r.end)

    def test_structural_markup_excluded(self) -> None:
        text = (
            "* A\n"
            ":PROPERTIES:\n:ID: 1\n:END:\n"
            "one two\n"
            "** B\n"
            "#+BEGIN_SRC\nignored code\n#+END_SRC\n"
            "three \\cite{x}\n"
        )
        # A: one, two, three + macro(2); B: three + macro(2)
        assert _by_title(text, aggregate_subtrees(text)) == {"A": 5, "B": 3}

    def test_custom_heading_marker(self) -> None:
        markup = MarkupConfig(heading_char="=")
        text = "= Top\nalpha\n== Sub\nbeta\n"
        counts = aggregate_subtrees(text, markup=markup)
        assert counts == {0: 2, text.index("== Sub"): 1}

    def test_fills_store(self) -> None:
        store = AnnotationStore()
        store.put(999, 7)
        counts = aggregate_subtrees(NESTED_TEXT, store=store)
        assert dict(store.items()) == counts
        assert 999 not in store

    def test_unterminated_block_aborts_whole_pass(self) -> None:
        text = "* A\nfine words\n* B\n#+BEGIN_SRC\nnever closed\n"
        store = AnnotationStore()
        store.put(0, 42)
        with pytest.raises(UnterminatedBlockError):
            aggregate_subtrees(text, store=store)
        assert len(store) == 0


class TestOutlineCounts:
    def test_rows_in_document_order(self) -> None:
        rows = outline_counts(NESTED_TEXT)
        assert [r.heading.title for r in rows] == ["A", "B", "C", "D", "E"]
        assert [r.words for r in rows] == [4, 2, 1, 1, 1]
        for r in rows:
            assert r.span.begin == r.heading.position
