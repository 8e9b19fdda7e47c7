#!/usr/bin/env python3
"""Count words in an outline document, in total or per heading subtree.

Structural markup (heading lines, blocks, comment lines, drawers) is not
counted; LaTeX macro invocations count as a fixed weight.

Usage:
    # Total for the whole document
    python3 scripts/outline_word_count.py notes.org

    # Total for a selected char range
    python3 scripts/outline_word_count.py notes.org --begin 120 --end 900

    # Per-heading subtree counts as JSON
    python3 scripts/outline_word_count.py notes.org --subtrees

    # Heading lines with counts right-aligned at column 72
    python3 scripts/outline_word_count.py notes.org --annotate --column 72

    # Show every classified region (for debugging a surprising count)
    python3 scripts/outline_word_count.py notes.org --explain
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from outline_wc.aggregator import aggregate_subtrees, outline_counts
from outline_wc.annotations import AnnotationStore
from outline_wc.io_utils import dump_json, read_document, save_json
from outline_wc.markup import DEFAULT_MARKUP, MarkupConfig, load_markup
from outline_wc.render import annotate_outline, status_message
from outline_wc.scanner import iter_regions, scan_range
from outline_wc.types import UnterminatedBlockError

log = logging.getLogger("outline_word_count")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Count words in an outline document, ignoring structural markup."
    )
    parser.add_argument("document", type=Path, help="Path to the outline document")
    parser.add_argument(
        "--begin", type=int, default=None, help="Selection start (char offset)"
    )
    parser.add_argument(
        "--end", type=int, default=None, help="Selection end (char offset, exclusive)"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--subtrees",
        action="store_true",
        help="Emit per-heading subtree counts as JSON.",
    )
    mode.add_argument(
        "--annotate",
        action="store_true",
        help="Print heading lines with their subtree counts appended.",
    )
    mode.add_argument(
        "--explain",
        action="store_true",
        help="Emit one JSON object per classified region of the selection.",
    )
    parser.add_argument(
        "--markup",
        type=Path,
        default=None,
        help="JSON file overriding the markup dialect (markers, drawer names, macro weight).",
    )
    parser.add_argument(
        "--column", type=int, default=80, help="Target column for --annotate labels"
    )
    parser.add_argument(
        "--indent-per-level",
        type=int,
        default=0,
        help="Shift --annotate labels left this many columns per heading level",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Also write --subtrees JSON to this path",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def _subtree_rows(text: str, markup: MarkupConfig) -> list[dict[str, object]]:
    return [
        {
            "position": row.heading.position,
            "depth": row.heading.depth,
            "title": row.heading.title,
            "begin": row.span.begin,
            "end": row.span.end,
            "words": row.words,
        }
        for row in outline_counts(text, markup)
    ]


def run(args: argparse.Namespace) -> int:
    if not args.document.exists():
        print(f"Error: document not found: {args.document}", file=sys.stderr)
        return 1
    markup = DEFAULT_MARKUP
    if args.markup is not None:
        if not args.markup.exists():
            print(f"Error: markup config not found: {args.markup}", file=sys.stderr)
            return 1
        try:
            markup = load_markup(args.markup)
        except ValueError as exc:
            print(f"Error: invalid markup config {args.markup}: {exc}", file=sys.stderr)
            return 1
        log.debug("Loaded markup config from %s", args.markup)

    text = read_document(args.document)
    has_selection = args.begin is not None or args.end is not None
    begin = args.begin if args.begin is not None else 0
    end = args.end if args.end is not None else len(text)

    try:
        if args.subtrees:
            rows = _subtree_rows(text, markup)
            if args.output is not None:
                save_json(rows, args.output)
                log.info("Wrote %d headings to %s", len(rows), args.output)
            dump_json(rows)
        elif args.annotate:
            store = AnnotationStore()
            aggregate_subtrees(text, markup=markup, store=store)
            for line in annotate_outline(
                text,
                dict(store.items()),
                markup,
                column=args.column,
                indent_per_level=args.indent_per_level,
            ):
                print(line)
        elif args.explain:
            for region in iter_regions(text, begin, end, markup=markup):
                dump_json(
                    {
                        "kind": region.kind.value,
                        "start": region.start,
                        "end": region.end,
                        "words": region.words,
                        "text": text[region.start:region.end],
                    },
                    pretty=False,
                )
        else:
            count = scan_range(text, begin, end, markup=markup)
            print(status_message(count, "region" if has_selection else "buffer"))
    except UnterminatedBlockError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        # Bad --begin/--end
        log.debug("Rejected selection [%s, %s)", args.begin, args.end)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    sys.exit(run(args))


if __name__ == "__main__":
    main()
