"""Cursor placement and wrap math for the console prompt.

All placement goes through :meth:`ConsoleRenderer.clamp_row` so the cursor
never lands on a row that would scroll the viewport. Without a terminal
(headless mode) every operation is a silent no-op.
"""

from __future__ import annotations

from dataclasses import dataclass

from termshell.dialect import TerminalDialect
from termshell.scrollback import ScrollbackLog
from termshell.terminal import Terminal

DEFAULT_LOG_MARGIN = 10


@dataclass
class PromptState:
    """Where the prompt sits on screen.

    ``top`` is the next free output row; ``anchor`` the row the prompt
    text starts on.
    """

    top: int = 0
    anchor: int = 0


def cursor_for_logical_index(prefix_len: int, index: int, width: int) -> tuple[int, int]:
    """Map a buffer index to ``(x, y_offset)`` relative to the prompt anchor.

    ``prefix_len`` is the width of the prompt text before the buffer. The
    result follows the terminal's hard wrap at *width* columns.
    """
    if width <= 0:
        return 0, 0
    position = index + prefix_len
    return position % width, position // width


class ConsoleRenderer:
    """Geometry helpers over a terminal whose size may change between calls."""

    def __init__(
        self,
        terminal: Terminal | None,
        dialect: TerminalDialect,
        scrollback: ScrollbackLog,
        log_margin: int = DEFAULT_LOG_MARGIN,
    ) -> None:
        self.terminal = terminal
        self.dialect = dialect
        self.scrollback = scrollback
        self.log_margin = log_margin

    @property
    def headless(self) -> bool:
        return self.terminal is None

    def last_usable_row(self) -> int:
        if self.terminal is None:
            return 0
        return self.dialect.last_usable_row(self.terminal.rows)

    def max_log_lines(self) -> int:
        """Scrollback capacity for the current terminal height."""
        if self.terminal is None:
            return 1
        return max(self.terminal.rows - self.log_margin, 1)

    def clamp_row(self, x: int, y: int) -> tuple[int, bool]:
        """Place the cursor at ``(x, y)``, clamping *y* to the last usable row.

        Returns the row actually used and whether clamping occurred.
        """
        if self.terminal is None:
            return y, False
        last = self.last_usable_row()
        clamped = y > last
        if clamped:
            y = last
        self.terminal.set_cursor_position(x, y)
        return y, clamped

    def place_at_bottom(self, x: int, y: int) -> None:
        """Place the cursor, clamping only against the absolute height."""
        if self.terminal is None:
            return
        self.terminal.set_cursor_position(x, min(y, self.terminal.rows - 1))

    def cursor_for_logical_index(self, prefix_len: int, index: int) -> tuple[int, int]:
        if self.terminal is None:
            return 0, 0
        return cursor_for_logical_index(prefix_len, index, self.terminal.columns)

    def clear_line(self, fill: str = " ", remove_from_log: bool = False) -> None:
        """Overwrite the cursor's row with *fill* and return to its first column.

        With *remove_from_log*, the scrollback entry at that row index is
        dropped too, keeping the log in step with what is on screen.
        """
        if self.terminal is None:
            return
        row = self.terminal.cursor_top
        if remove_from_log:
            self.scrollback.remove_at(row)
        self.terminal.set_cursor_position(0, row)
        self.terminal.write(fill * self.terminal.columns)
        # The full-width write leaves the cursor at the wrap point
        self.terminal.set_cursor_position(0, row)
