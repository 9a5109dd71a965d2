"""Terminal dialects.

Line-buffered (Unix-style) terminals scroll as soon as output reaches the
last row, so the whole height is usable. Windowed consoles keep one spare row
below the prompt so that placing the cursor never scrolls the viewport.
The dialect is resolved once and handed to the renderer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TerminalDialect:
    """Platform capabilities that affect cursor math."""

    name: str
    line_buffered: bool

    def last_usable_row(self, rows: int) -> int:
        """Return the lowest row the prompt may occupy for a *rows*-high terminal."""
        margin = 1 if self.line_buffered else 2
        return max(rows - margin, 0)


LINE_BUFFERED = TerminalDialect(name="line-buffered", line_buffered=True)
WINDOWED = TerminalDialect(name="windowed", line_buffered=False)

_DIALECTS: dict[str, TerminalDialect] = {
    LINE_BUFFERED.name: LINE_BUFFERED,
    WINDOWED.name: WINDOWED,
}


def detect_dialect() -> TerminalDialect:
    """Pick the dialect for the running platform."""
    return WINDOWED if os.name == "nt" else LINE_BUFFERED


def resolve_dialect(name: str | None) -> TerminalDialect:
    """Resolve a dialect by name; ``None`` or ``"auto"`` detects it.

    Raises ``ValueError`` for unknown names.
    """
    if name is None or name == "auto":
        return detect_dialect()
    try:
        return _DIALECTS[name]
    except KeyError:
        raise ValueError(
            f"unknown terminal dialect {name!r} (expected one of: auto, {', '.join(_DIALECTS)})"
        ) from None
