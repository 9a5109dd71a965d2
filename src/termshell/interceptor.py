"""Output interception.

Everything the session prints, and everything other code prints while
stdout is redirected, flows through a :class:`ConsoleStream`. The stream
notifies its observers of every write, read and seek; the
:class:`OutputInterceptor` observer records each write in the scrollback and
repaints it above the live prompt.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from termshell.scrollback import LogLine
from termshell.utils import visible_width

if TYPE_CHECKING:
    from termshell.session import ConsoleSession

logger = logging.getLogger(__name__)


class OutputObserver:
    """Receives notifications from a :class:`ConsoleStream`.

    Subclasses override the hooks they care about; the defaults do nothing.
    """

    def on_write(self, data: bytes) -> None:
        pass

    def on_read(self, count: int, size: int) -> None:
        pass

    def on_seek(self, position: int) -> None:
        pass


class _DiscardSink(io.RawIOBase):
    """Writable raw stream that drops everything written to it."""

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        return len(b)


class ConsoleStream(io.RawIOBase):
    """Pass-through raw stream that reports every operation to observers.

    Nothing is buffered here: reads, writes and seeks go straight to the
    inner stream before observers are notified.
    """

    def __init__(self, inner: io.RawIOBase | io.BufferedIOBase | None = None) -> None:
        super().__init__()
        self._inner = inner if inner is not None else _DiscardSink()
        self._observers: list[OutputObserver] = []

    def add_observer(self, observer: OutputObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: OutputObserver) -> None:
        self._observers.remove(observer)

    def readable(self) -> bool:
        return self._inner.readable()

    def writable(self) -> bool:
        return self._inner.writable()

    def seekable(self) -> bool:
        return self._inner.seekable()

    def readinto(self, b) -> int:
        count = self._inner.readinto(b)
        for observer in self._observers:
            observer.on_read(count or 0, len(b))
        return count

    def write(self, b) -> int:
        data = bytes(b)
        self._inner.write(data)
        self._inner.flush()
        for observer in self._observers:
            observer.on_write(data)
        return len(data)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        position = self._inner.seek(offset, whence)
        for observer in self._observers:
            observer.on_seek(position)
        return position

    def tell(self) -> int:
        return self._inner.tell()

    def flush(self) -> None:
        self._inner.flush()


def open_text_stream(stream: ConsoleStream, encoding: str) -> io.TextIOWrapper:
    """Wrap *stream* as a line-buffered text stream suitable for ``sys.stdout``.

    Line buffering turns ``print("x")`` (two writes) into one intercepted
    write of ``"x\\n"``.
    """
    return io.TextIOWrapper(
        io.BufferedWriter(stream),
        encoding=encoding,
        errors="replace",
        line_buffering=True,
    )


def count_rows(text: str, columns: int) -> int:
    """Rows advanced by writing *text* at column 0 of a *columns*-wide terminal.

    Every ``"\\n"`` ends a row (``"\\r\\n"`` counts once); each line also
    adds one row per wrap. A line exactly as wide as the terminal does not
    wrap until another character follows it.
    """
    rows = text.count("\n")
    if columns <= 0:
        return rows
    for line in text.split("\n"):
        width = visible_width(line.replace("\r", ""))
        rows += max(width - 1, 0) // columns
    return rows


class OutputInterceptor(OutputObserver):
    """Keeps the scrollback and the live prompt consistent with every write."""

    def __init__(self, session: ConsoleSession) -> None:
        self._session = session

    def on_write(self, data: bytes) -> None:
        session = self._session
        terminal = session.terminal
        if terminal is None:
            return

        text = data.decode(session.config.encoding, errors="replace")
        prompt = session.prompt

        with session.lock:
            foreground, background = session.output_colors()
            session.scrollback.max_lines = session.renderer.max_log_lines()
            session.scrollback.append(LogLine(text, foreground, background))

            if not session.screens.on_main_screen:
                # The overlay owns the screen; only account for the row
                prompt.top += 1
                return

            row, _ = session.renderer.clamp_row(0, prompt.top)
            prompt.top += 1
            session.editor.erase_prompt(row)
            terminal.set_foreground(foreground)
            terminal.set_background(background)
            terminal.write(text)
            terminal.reset_colors()

            prompt.top += count_rows(text, terminal.columns) - 1
            session.editor.draw_input_line()
