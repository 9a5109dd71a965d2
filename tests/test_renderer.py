"""Tests for termshell.renderer -- wrap math and row clamping."""

from __future__ import annotations

from termshell.dialect import LINE_BUFFERED, WINDOWED
from termshell.renderer import ConsoleRenderer, cursor_for_logical_index
from termshell.scrollback import LogLine, ScrollbackLog

from .virtual_terminal import VirtualTerminal


class TestCursorForLogicalIndex:
    """Buffer index -> (x, row offset) for an 80-column terminal and a 3-column prompt."""

    def test_start_of_buffer(self) -> None:
        assert cursor_for_logical_index(3, 0, 80) == (3, 0)

    def test_last_column_of_first_row(self) -> None:
        assert cursor_for_logical_index(3, 76, 80) == (79, 0)

    def test_first_column_of_second_row(self) -> None:
        assert cursor_for_logical_index(3, 77, 80) == (0, 1)

    def test_second_row(self) -> None:
        assert cursor_for_logical_index(3, 80, 80) == (3, 1)

    def test_third_row(self) -> None:
        assert cursor_for_logical_index(3, 157, 80) == (0, 2)

    def test_zero_width(self) -> None:
        assert cursor_for_logical_index(3, 10, 0) == (0, 0)


class TestClampRow:
    """clamp_row never lets the cursor reach a row that would scroll."""

    def test_line_buffered_uses_last_row(self) -> None:
        terminal = VirtualTerminal(rows=24, columns=80)
        renderer = ConsoleRenderer(terminal, LINE_BUFFERED, ScrollbackLog(10))
        assert renderer.clamp_row(0, 30) == (23, True)
        assert terminal.cursor_top == 23

    def test_windowed_keeps_a_spare_row(self) -> None:
        terminal = VirtualTerminal(rows=24, columns=80)
        renderer = ConsoleRenderer(terminal, WINDOWED, ScrollbackLog(10))
        assert renderer.clamp_row(5, 23) == (22, True)
        assert (terminal.cursor_left, terminal.cursor_top) == (5, 22)

    def test_rows_in_range_are_untouched(self) -> None:
        terminal = VirtualTerminal(rows=24, columns=80)
        renderer = ConsoleRenderer(terminal, LINE_BUFFERED, ScrollbackLog(10))
        assert renderer.clamp_row(4, 7) == (7, False)
        assert (terminal.cursor_left, terminal.cursor_top) == (4, 7)

    def test_headless_is_a_no_op(self) -> None:
        renderer = ConsoleRenderer(None, LINE_BUFFERED, ScrollbackLog(10))
        assert renderer.clamp_row(0, 99) == (99, False)
        assert renderer.cursor_for_logical_index(3, 5) == (0, 0)
        renderer.clear_line()
        renderer.place_at_bottom(0, 5)


class TestMaxLogLines:
    def test_height_minus_margin(self) -> None:
        renderer = ConsoleRenderer(VirtualTerminal(rows=24), LINE_BUFFERED, ScrollbackLog(1))
        assert renderer.max_log_lines() == 14

    def test_never_below_one(self) -> None:
        renderer = ConsoleRenderer(VirtualTerminal(rows=5), LINE_BUFFERED, ScrollbackLog(1))
        assert renderer.max_log_lines() == 1


class TestClearLine:
    """clear_line blanks the cursor's row and returns to column 0."""

    def test_blanks_row(self) -> None:
        terminal = VirtualTerminal(rows=5, columns=10)
        renderer = ConsoleRenderer(terminal, LINE_BUFFERED, ScrollbackLog(10))
        terminal.set_cursor_position(0, 2)
        terminal.write("hello")
        renderer.clear_line()
        assert terminal.line(2) == ""
        assert (terminal.cursor_left, terminal.cursor_top) == (0, 2)

    def test_bottom_row_does_not_scroll(self) -> None:
        terminal = VirtualTerminal(rows=5, columns=10)
        renderer = ConsoleRenderer(terminal, LINE_BUFFERED, ScrollbackLog(10))
        terminal.set_cursor_position(0, 4)
        renderer.clear_line()
        assert terminal.scroll_count == 0
        assert terminal.cursor_top == 4

    def test_custom_fill(self) -> None:
        terminal = VirtualTerminal(rows=3, columns=4)
        renderer = ConsoleRenderer(terminal, LINE_BUFFERED, ScrollbackLog(10))
        renderer.clear_line("-")
        assert terminal.line(0) == "----"

    def test_remove_from_log(self) -> None:
        terminal = VirtualTerminal(rows=5, columns=10)
        log = ScrollbackLog(10)
        log.append(LogLine("a\n"))
        log.append(LogLine("b\n"))
        renderer = ConsoleRenderer(terminal, LINE_BUFFERED, log)
        terminal.set_cursor_position(0, 1)
        renderer.clear_line(remove_from_log=True)
        assert [line.text for line in log] == ["a\n"]
