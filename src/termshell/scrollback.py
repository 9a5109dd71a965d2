"""Bounded log of rendered output lines."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass

from termshell.terminal import Color


@dataclass(frozen=True)
class LogLine:
    """One intercepted write, with the colours it was written in."""

    text: str
    foreground: Color = Color.DEFAULT
    background: Color = Color.DEFAULT


class ScrollbackLog:
    """FIFO log of output lines, never longer than ``max_lines``.

    Appending past the cap evicts the oldest entries. Lowering the cap trims
    immediately. Iteration walks the live list, so a concurrent append
    during iteration surfaces as ``RuntimeError`` to the iterating caller.
    """

    def __init__(self, max_lines: int) -> None:
        self._lines: list[LogLine] = []
        self._max_lines = max(max_lines, 1)
        self._version = 0
        self._lock = threading.Lock()

    @property
    def max_lines(self) -> int:
        return self._max_lines

    @max_lines.setter
    def max_lines(self, value: int) -> None:
        with self._lock:
            self._max_lines = max(value, 1)
            self._trim()

    def append(self, line: LogLine) -> None:
        with self._lock:
            self._lines.append(line)
            self._trim()

    def remove_at(self, index: int) -> LogLine | None:
        """Remove and return the entry at *index*, or ``None`` if out of range."""
        with self._lock:
            if not 0 <= index < len(self._lines):
                return None
            self._version += 1
            return self._lines.pop(index)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
            self._version += 1

    def snapshot(self) -> list[LogLine]:
        """Return a copy of the current entries, oldest first."""
        with self._lock:
            return list(self._lines)

    def _trim(self) -> None:
        self._version += 1
        overflow = len(self._lines) - self._max_lines
        if overflow > 0:
            del self._lines[:overflow]

    def __iter__(self) -> Iterator[LogLine]:
        version = self._version
        for index in range(len(self._lines)):
            if self._version != version:
                raise RuntimeError("scrollback changed during iteration")
            yield self._lines[index]

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index: int) -> LogLine:
        return self._lines[index]
