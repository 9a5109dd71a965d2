"""Logging handler that prints records through a console session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from termshell.terminal import Color

if TYPE_CHECKING:
    from termshell.session import ConsoleSession


def _color_for(levelno: int) -> Color:
    if levelno >= logging.ERROR:
        return Color.RED
    if levelno >= logging.WARNING:
        return Color.YELLOW
    if levelno >= logging.INFO:
        return Color.WHITE
    return Color.GRAY


class ConsoleLogHandler(logging.Handler):
    """Writes log records above the prompt, coloured by level.

    Records from ``termshell`` loggers are dropped: they are emitted while the
    session is drawing and would re-enter it.
    """

    def __init__(self, session: ConsoleSession, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.session = session

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "termshell" or record.name.startswith("termshell."):
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            self.session.write_line(message, color=_color_for(record.levelno))
        except Exception:
            self.handleError(record)
