"""Configuration for a console session."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from termshell.dialect import resolve_dialect
from termshell.history import DEFAULT_HISTORY_LENGTH, MAX_HISTORY_LENGTH
from termshell.renderer import DEFAULT_LOG_MARGIN

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


@dataclass
class SessionConfig:
    """Session configuration."""

    prompt: str = "#> "
    history_length: int = DEFAULT_HISTORY_LENGTH
    log_margin: int = DEFAULT_LOG_MARGIN
    prepend_timestamp: bool = True
    timestamp_format: str = "%H:%M:%S"
    allow_cmd_history: bool = True
    allow_cmd_exit: bool = True
    dialect: str = "auto"
    encoding: str = "utf-8"
    title: str = "Console"

    @classmethod
    def from_env(cls, base: SessionConfig | None = None) -> SessionConfig:
        """Overlay ``TERMSHELL_*`` environment variables on *base*."""
        config = replace(base) if base is not None else cls()

        prompt = os.environ.get("TERMSHELL_PROMPT")
        if prompt is not None:
            config.prompt = prompt

        length = os.environ.get("TERMSHELL_HISTORY_LENGTH")
        if length is not None:
            try:
                value = int(length)
            except ValueError:
                logger.warning("ignoring TERMSHELL_HISTORY_LENGTH=%r: not an integer", length)
            else:
                if 1 <= value <= MAX_HISTORY_LENGTH:
                    config.history_length = value
                else:
                    logger.warning("ignoring TERMSHELL_HISTORY_LENGTH=%r: out of range", length)

        timestamps = os.environ.get("TERMSHELL_TIMESTAMPS")
        if timestamps is not None:
            word = timestamps.strip().lower()
            if word in _TRUE_WORDS:
                config.prepend_timestamp = True
            elif word in _FALSE_WORDS:
                config.prepend_timestamp = False
            else:
                logger.warning("ignoring TERMSHELL_TIMESTAMPS=%r", timestamps)

        dialect = os.environ.get("TERMSHELL_DIALECT")
        if dialect is not None:
            try:
                resolve_dialect(dialect)
            except ValueError:
                logger.warning("ignoring TERMSHELL_DIALECT=%r: unknown dialect", dialect)
            else:
                config.dialect = dialect

        return config
