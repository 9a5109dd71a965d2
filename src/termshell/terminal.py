"""Terminal abstraction for cursor-addressed console output and key input.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that manages cbreak mode, cursor placement and visibility,
colours and screen clearing via ANSI escape sequences, and blocking key reads.
"""

from __future__ import annotations

import codecs
import enum
import logging
import os
import re
import select
import sys
import termios
import tty
from typing import Protocol, TextIO

from termshell.keys import KeyEvent, key_event, split_sequences
from termshell.utils import visible_width

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_RESET_COLORS = "\x1b[0m"
_CURSOR_POSITION_FMT = "\x1b[{};{}H"
_SGR_FMT = "\x1b[{}m"
_SET_TITLE_FMT = "\x1b]0;{}\x07"

_ESCAPE_SEQUENCE_RE = re.compile(
    r"(\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|\x1b[@-Z\\-_])"
)

# Seconds to wait for the rest of an escape sequence before treating a
# lone ESC as the escape key.
_ESCAPE_TIMEOUT = 0.05


class Color(enum.Enum):
    """The 16 console colours plus the terminal default.

    Values are SGR foreground codes; the background code is ``value + 10``.
    """

    DEFAULT = 39
    BLACK = 30
    DARK_RED = 31
    DARK_GREEN = 32
    DARK_YELLOW = 33
    DARK_BLUE = 34
    DARK_MAGENTA = 35
    DARK_CYAN = 36
    GRAY = 37
    DARK_GRAY = 90
    RED = 91
    GREEN = 92
    YELLOW = 93
    BLUE = 94
    MAGENTA = 95
    CYAN = 96
    WHITE = 97

    @property
    def fg_code(self) -> str:
        return _SGR_FMT.format(self.value)

    @property
    def bg_code(self) -> str:
        return _SGR_FMT.format(self.value + 10)


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the terminal device driven by a console session."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    def read_key(self) -> KeyEvent: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    @property
    def cursor_left(self) -> int: ...

    @property
    def cursor_top(self) -> int: ...

    def set_cursor_position(self, x: int, y: int) -> None: ...

    @property
    def foreground(self) -> Color: ...

    @property
    def background(self) -> Color: ...

    def set_foreground(self, color: Color) -> None: ...

    def set_background(self, color: Color) -> None: ...

    def reset_colors(self) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_screen(self) -> None: ...

    def set_title(self, title: str) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the process's stdin/stdout.

    Puts stdin in cbreak mode (no echo, no line buffering, output processing
    left on) while started. ANSI terminals cannot cheaply report the cursor
    position, so the position is tracked from everything written here.
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin or sys.__stdin__
        self._stdout = stdout or sys.__stdout__
        self._original_termios: list | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: list[str] = []
        self._partial: str = ""
        self._x = 0
        self._y = 0
        self._foreground = Color.DEFAULT
        self._background = Color.DEFAULT
        self._title = ""

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    @property
    def cursor_left(self) -> int:
        return min(self._x, self.columns - 1)

    @property
    def cursor_top(self) -> int:
        return self._y

    @property
    def foreground(self) -> Color:
        return self._foreground

    @property
    def background(self) -> Color:
        return self._background

    @property
    def title(self) -> str:
        return self._title

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enter cbreak mode, saving the previous terminal attributes."""
        if self._original_termios is not None:
            return
        fd = self._stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        logger.debug("terminal entered cbreak mode (%dx%d)", self.columns, self.rows)

    def stop(self) -> None:
        """Restore terminal attributes and colours."""
        self.reset_colors()
        self.show_cursor()
        if self._original_termios is not None:
            termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._original_termios)
            self._original_termios = None
            logger.debug("terminal attributes restored")

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write *data* to stdout and advance the tracked cursor."""
        self._raw_write(data)
        self._advance(data)

    def set_cursor_position(self, x: int, y: int) -> None:
        x = max(0, min(x, self.columns - 1))
        y = max(0, min(y, self.rows - 1))
        self._raw_write(_CURSOR_POSITION_FMT.format(y + 1, x + 1))
        self._x = x
        self._y = y

    def set_foreground(self, color: Color) -> None:
        self._foreground = color
        self._raw_write(color.fg_code)

    def set_background(self, color: Color) -> None:
        self._background = color
        self._raw_write(color.bg_code)

    def reset_colors(self) -> None:
        self._foreground = Color.DEFAULT
        self._background = Color.DEFAULT
        self._raw_write(_RESET_COLORS)

    def hide_cursor(self) -> None:
        self._raw_write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._raw_write(_SHOW_CURSOR)

    def clear_screen(self) -> None:
        self._raw_write(_CLEAR_SCREEN)
        self._x = 0
        self._y = 0

    def set_title(self, title: str) -> None:
        self._title = title
        self._raw_write(_SET_TITLE_FMT.format(title))

    # -- input --------------------------------------------------------------

    def read_key(self) -> KeyEvent:
        """Block until one complete key sequence is available.

        Raises ``EOFError`` when stdin is closed.
        """
        while not self._pending:
            buffer = self._partial + self._read_chunk()
            sequences, self._partial = split_sequences(buffer)
            if self._partial and not self._wait_readable(_ESCAPE_TIMEOUT):
                # Nothing followed the escape: emit what we have
                sequences.append(self._partial)
                self._partial = ""
            self._pending.extend(sequences)
        return key_event(self._pending.pop(0))

    # -- private ------------------------------------------------------------

    def _read_chunk(self) -> str:
        raw = os.read(self._stdin.fileno(), 4096)
        if not raw:
            raise EOFError("stdin closed")
        return self._decoder.decode(raw)

    def _wait_readable(self, timeout: float) -> bool:
        readable, _, _ = select.select([self._stdin.fileno()], [], [], timeout)
        return bool(readable)

    def _advance(self, data: str) -> None:
        """Move the tracked cursor as the terminal would for *data*.

        Filling the last column leaves the cursor in the pending-wrap state
        (``_x == columns``); the wrap happens on the next printable character.
        """
        columns = self.columns
        rows = self.rows
        for part in _ESCAPE_SEQUENCE_RE.split(data):
            if not part or part.startswith("\x1b"):
                continue
            for ch in part:
                if ch == "\n":
                    self._x = 0
                    self._y = min(self._y + 1, rows - 1)
                elif ch == "\r":
                    self._x = 0
                elif ch == "\b":
                    self._x = max(min(self._x, columns - 1) - 1, 0)
                elif ch == "\t":
                    self._x = min((self._x // 8 + 1) * 8, columns - 1)
                else:
                    if self._x >= columns:
                        self._x = 0
                        self._y = min(self._y + 1, rows - 1)
                    self._x = min(self._x + visible_width(ch), columns)

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing any redirection."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            pass


def open_terminal() -> ProcessTerminal | None:
    """Return a terminal for the current process, or ``None`` when headless."""
    stdin = sys.__stdin__
    stdout = sys.__stdout__
    try:
        if stdin is None or stdout is None or not (stdin.isatty() and stdout.isatty()):
            logger.debug("no interactive terminal available")
            return None
    except ValueError:
        # Closed standard streams
        return None
    return ProcessTerminal(stdin, stdout)
