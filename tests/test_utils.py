"""Tests for termshell.utils -- visible width measurement."""

from __future__ import annotations

from termshell.utils import strip_ansi, visible_width


class TestVisibleWidth:
    def test_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty(self) -> None:
        assert visible_width("") == 0

    def test_ansi_sequences_take_no_columns(self) -> None:
        assert visible_width("\x1b[31mred\x1b[0m") == 3

    def test_wide_characters(self) -> None:
        assert visible_width("日本") == 4

    def test_combining_mark(self) -> None:
        assert visible_width("é") == 1

    def test_tab_counts_three_columns(self) -> None:
        assert visible_width("\t") == 3

    def test_control_characters_take_no_columns(self) -> None:
        assert visible_width("a\nb") == 2


class TestStripAnsi:
    def test_removes_csi_and_osc(self) -> None:
        assert strip_ansi("\x1b[1;32mok\x1b[0m\x1b]0;title\x07") == "ok"
