"""Tests for outline_wc.markup module."""
from pathlib import Path

import pytest

from outline_wc.markup import (
    DEFAULT_DRAWER_NAMES,
    DEFAULT_MARKUP,
    MarkupConfig,
    compile_markup,
    load_markup,
    markup_from_dict,
    markup_to_dict,
    save_markup,
)


class TestMarkupConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_MARKUP.heading_char == "*"
        assert DEFAULT_MARKUP.block_open == "#+BEGIN"
        assert DEFAULT_MARKUP.block_close == "#+END"
        assert DEFAULT_MARKUP.drawer_names == DEFAULT_DRAWER_NAMES
        assert DEFAULT_MARKUP.macro_weight == 2

    def test_heading_char_must_be_single(self) -> None:
        with pytest.raises(ValueError, match="single character"):
            MarkupConfig(heading_char="**")

    def test_empty_marker_rejected(self) -> None:
        with pytest.raises(ValueError, match="block_open"):
            MarkupConfig(block_open="")

    def test_empty_drawer_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="drawer_names"):
            MarkupConfig(drawer_names=("PROPERTIES", ""))

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValueError, match="macro_weight"):
            MarkupConfig(macro_weight=-1)


class TestFromDict:
    def test_lists_become_tuples(self) -> None:
        cfg = markup_from_dict({"drawer_names": ["NOTES", "LOGBOOK"], "macro_weight": 1})
        assert cfg.drawer_names == ("NOTES", "LOGBOOK")
        assert cfg.macro_weight == 1

    def test_unknown_keys_ignored(self) -> None:
        cfg = markup_from_dict({"heading_char": "=", "column": 72})
        assert cfg.heading_char == "="
        assert cfg.block_open == DEFAULT_MARKUP.block_open

    def test_drawer_names_string_rejected(self) -> None:
        with pytest.raises(ValueError, match="drawer_names"):
            markup_from_dict({"drawer_names": "PROPERTIES"})

    def test_to_dict(self) -> None:
        d = markup_to_dict(DEFAULT_MARKUP)
        assert d["drawer_names"] == list(DEFAULT_DRAWER_NAMES)
        assert markup_from_dict(d) == DEFAULT_MARKUP


class TestPersistence:
    def test_save_and_load(self, tmp_path: Path) -> None:
        cfg = MarkupConfig(comment_marker="//", macro_weight=1, case_insensitive=False)
        path = tmp_path / "nested" / "markup.json"
        save_markup(cfg, path)
        assert load_markup(path) == cfg

    def test_load_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "markup.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            load_markup(path)


class TestCompileMarkup:
    def test_cached_per_config(self) -> None:
        assert compile_markup(MarkupConfig()) is compile_markup(MarkupConfig())
        assert compile_markup(MarkupConfig(macro_weight=1)) is not compile_markup()

    def test_case_sensitivity(self) -> None:
        strict = compile_markup(MarkupConfig(case_insensitive=False))
        assert strict.block_open.match("#+BEGIN_SRC")
        assert strict.block_open.match("#+begin_src") is None
        assert compile_markup().block_open.match("#+begin_src")

    def test_heading_pattern_groups(self) -> None:
        m = compile_markup().heading.match("*** Deep title")
        assert m is not None
        assert m.group(1) == "***"
        assert m.group(2) == "Deep title"
