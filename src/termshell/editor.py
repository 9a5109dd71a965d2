"""Input editor - the single editable line under the scrollback.

Turns key events into edits of the line buffer, history browsing, tab
completion and submissions, and keeps the prompt drawn at the right place
as output pushes it down the screen.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from termshell.keys import KeyEvent
from termshell.renderer import cursor_for_logical_index
from termshell.terminal import Color
from termshell.utils import visible_width

if TYPE_CHECKING:
    from termshell.session import ConsoleSession

logger = logging.getLogger(__name__)

EditorAction = Literal[
    "submit",
    "deleteCharBackward",
    "deleteCharForward",
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "historyOlder",
    "historyNewer",
    "complete",
    "cancel",
]

DEFAULT_KEYBINDINGS: dict[EditorAction, list[str]] = {
    "submit": ["enter"],
    "deleteCharBackward": ["backspace"],
    "deleteCharForward": ["delete", "ctrl+d"],
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "historyOlder": ["up"],
    "historyNewer": ["down"],
    "complete": ["tab"],
    "cancel": ["escape"],
}

COMPLETIONS_PER_ROW = 5


class InputEditor:
    """Owns the edit buffer, its cursor index and the prompt drawing."""

    def __init__(self, session: ConsoleSession) -> None:
        self._session = session
        self._text = ""
        self._cursor = 0
        self._drawn_rows = 1
        self._key_to_action: dict[str, EditorAction] = {}
        for action, keys in DEFAULT_KEYBINDINGS.items():
            for key in keys:
                self._key_to_action[key] = action

    # -- state ----------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def prefix_len(self) -> int:
        return visible_width(self._session.config.prompt)

    def _check_cursor(self) -> None:
        if not 0 <= self._cursor <= len(self._text):
            raise RuntimeError(
                f"cursor {self._cursor} outside buffer of length {len(self._text)}"
            )

    def set_text(self, text: str) -> None:
        """Replace the whole buffer and move the cursor to its end."""
        with self._session.lock:
            self._text = text
            self._cursor = len(text)
            self._check_cursor()

    def clear(self) -> None:
        self.set_text("")

    # -- key handling ----------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> None:
        action = self._key_to_action.get(event.key or "")
        if action is None:
            if event.printable:
                self.insert(event.char)
            return

        if action == "submit":
            self.submit()
        elif action == "deleteCharBackward":
            self.backspace()
        elif action == "deleteCharForward":
            self.delete()
        elif action == "cursorLeft":
            self.move_cursor(self._cursor - 1)
        elif action == "cursorRight":
            self.move_cursor(self._cursor + 1)
        elif action == "cursorLineStart":
            self.move_cursor(0)
        elif action == "cursorLineEnd":
            self.move_cursor(len(self._text))
        elif action == "historyOlder":
            self.history_older()
        elif action == "historyNewer":
            self.history_newer()
        elif action == "complete":
            self.complete()
        # "cancel" only matters while an overlay screen is up

    # -- edits -------------------------------------------------------------------

    def insert(self, chars: str) -> None:
        session = self._session
        with session.lock:
            at_end = self._cursor == len(self._text)
            self._text = self._text[: self._cursor] + chars + self._text[self._cursor :]
            self._cursor += len(chars)
            self._check_cursor()

            terminal = session.terminal
            if terminal is None:
                return
            x, y = cursor_for_logical_index(self.prefix_len, self._cursor, terminal.columns)
            if at_end and x != 0 and x >= len(chars):
                # Appending without crossing a row edge: just echo it
                terminal.write(chars)
                self._drawn_rows = max(self._drawn_rows, y + 1)
            else:
                self.draw_input_line()

    def backspace(self) -> None:
        with self._session.lock:
            if self._cursor == 0:
                return
            self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
            self._cursor -= 1
            self._check_cursor()
            self.draw_input_line()

    def delete(self) -> None:
        with self._session.lock:
            if self._cursor >= len(self._text):
                return
            self._text = self._text[: self._cursor] + self._text[self._cursor + 1 :]
            self._check_cursor()
            self.draw_input_line()

    def move_cursor(self, index: int) -> None:
        with self._session.lock:
            index = max(0, min(index, len(self._text)))
            if index == self._cursor:
                return
            self._cursor = index
            self._check_cursor()
            self.place_cursor()

    # -- history -------------------------------------------------------------------

    def history_older(self) -> None:
        with self._session.lock:
            entry = self._session.history.older(self._text)
            if entry is None:
                return
            self.set_text(entry)
            self.draw_input_line()

    def history_newer(self) -> None:
        with self._session.lock:
            entry = self._session.history.newer()
            if entry is None:
                return
            self.set_text(entry)
            self.draw_input_line()

    # -- completion -------------------------------------------------------------------

    def completions(self) -> list[str]:
        """CVar names, then command names, that start with the buffer."""
        prefix = self._text
        session = self._session
        cvars = [name for name in session.cvars.names() if name.startswith(prefix)]
        commands = [name for name in session.commands.names() if name.startswith(prefix)]
        return cvars + commands

    def complete(self) -> None:
        session = self._session
        if not self._text.strip():
            return

        suggestions = self.completions()
        logger.debug("%d completion(s) for %r", len(suggestions), self._text)
        if len(suggestions) == 1:
            self._complete_single(suggestions[0])
        elif suggestions:
            # Written outside the editor lock: these go through the output stream
            session.suppress_timestamps = True
            try:
                for start in range(0, len(suggestions), COMPLETIONS_PER_ROW):
                    row = suggestions[start : start + COMPLETIONS_PER_ROW]
                    session.write_standard("".join(f"{name}\t" for name in row))
                session.write_standard("")
            finally:
                session.suppress_timestamps = False

    def _complete_single(self, suggestion: str) -> None:
        session = self._session
        with session.lock:
            old = self._text
            was_at_end = self._cursor == len(old)
            self.set_text(suggestion)

            terminal = session.terminal
            if terminal is None:
                return
            if was_at_end and self.prefix_len + visible_width(suggestion) < terminal.columns:
                terminal.write("\b" * len(old) + suggestion)
            else:
                self.draw_input_line()

    # -- submission ---------------------------------------------------------------------

    def submit(self) -> None:
        session = self._session
        text = self._text
        self._cursor = 0
        if text.strip():
            session.dispatcher.execute(text)
            return

        self.clear()
        session.suppress_timestamps = True
        try:
            session.write_standard("")
        finally:
            session.suppress_timestamps = False

    # -- drawing --------------------------------------------------------------------------

    def draw_input_line(self) -> None:
        """Redraw the prompt and buffer on row ``top``, scrolling if needed."""
        session = self._session
        terminal = session.terminal
        if terminal is None:
            return

        with session.lock:
            if not session.screens.on_main_screen:
                return
            prompt = session.prompt
            renderer = session.renderer

            terminal.set_foreground(Color.WHITE)
            # Where the last output ended; clamp_row moves the cursor
            output_row = terminal.cursor_top
            row, clamped = renderer.clamp_row(0, prompt.top)
            if clamped:
                self._scroll_above(row, output_row)
                prompt.top = row

            self.erase_prompt(row)

            line = session.config.prompt + self._text
            terminal.write(line)

            # A prompt that wraps past the last row scrolls the viewport up
            width = visible_width(line)
            self._drawn_rows = max(width - 1, 0) // max(terminal.columns, 1) + 1
            last_row = row + self._drawn_rows - 1
            anchor = row - max(last_row - (terminal.rows - 1), 0)

            # After a full-width line the cursor belongs on the row below
            _, cursor_row = renderer.cursor_for_logical_index(self.prefix_len, self._cursor)
            overflow = anchor + cursor_row - renderer.last_usable_row()
            if overflow > 0:
                renderer.place_at_bottom(0, terminal.rows - 1)
                terminal.write("\n" * overflow)
                anchor -= overflow

            prompt.anchor = max(anchor, 0)
            prompt.top = prompt.anchor
            self.place_cursor()

    def erase_prompt(self, row: int) -> None:
        """Blank the rows the last drawn prompt covered, starting at *row*.

        Leaves the cursor at the start of *row*.
        """
        session = self._session
        terminal = session.terminal
        if terminal is None:
            return
        with session.lock:
            for extra in range(self._drawn_rows - 1, -1, -1):
                if row + extra < terminal.rows:
                    session.renderer.place_at_bottom(0, row + extra)
                    session.renderer.clear_line(" ")

    def _scroll_above(self, row: int, output_row: int) -> None:
        """Scroll the viewport until output ending on *output_row* sits above *row*."""
        terminal = self._session.terminal
        excess = output_row - row
        if excess > 0:
            self._session.renderer.place_at_bottom(0, terminal.rows - 1)
            terminal.write("\n" * excess)

    def place_cursor(self) -> None:
        """Move the terminal cursor to the buffer's cursor index."""
        session = self._session
        if session.terminal is None:
            return
        with session.lock:
            x, y = session.renderer.cursor_for_logical_index(self.prefix_len, self._cursor)
            session.renderer.clamp_row(x, session.prompt.anchor + y)
