"""Overlay screens.

An overlay screen takes over the whole terminal until the user presses
Escape. While it is active, output is still recorded in the scrollback; when
the session returns to the main view the scrollback is repainted and the
prompt comes back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Protocol

from termshell.errors import DefinitionError
from termshell.terminal import Color, Terminal

if TYPE_CHECKING:
    from termshell.session import ConsoleSession

logger = logging.getLogger(__name__)


class Screen(Protocol):
    """A full-terminal view that temporarily replaces the main view."""

    name: str
    description: str

    def start(self) -> None: ...

    def stop(self) -> None: ...


class TextScreen:
    """Overlay that paints a title bar and a fixed block of text."""

    def __init__(
        self,
        name: str,
        description: str,
        lines: list[str],
        terminal: Terminal | None,
        *,
        color: Color = Color.WHITE,
    ) -> None:
        self.name = name
        self.description = description
        self.lines = list(lines)
        self.terminal = terminal
        self.color = color
        self.active = False

    def start(self) -> None:
        self.active = True
        if self.terminal is None:
            return
        self.terminal.set_cursor_position(0, 0)
        self.terminal.set_foreground(Color.CYAN)
        self.terminal.write(f"{self.name} - {self.description}\n")
        self.terminal.set_foreground(self.color)
        for line in self.lines[: max(self.terminal.rows - 3, 0)]:
            self.terminal.write(line + "\n")
        self.terminal.set_foreground(Color.DARK_GRAY)
        self.terminal.set_cursor_position(0, self.terminal.rows - 1)
        self.terminal.write("Press ESC to return.")

    def stop(self) -> None:
        self.active = False


class ScreenRegistry:
    """Screens by name, in registration order."""

    def __init__(self) -> None:
        self._screens: dict[str, Screen] = {}

    def add(self, screen: Screen) -> None:
        if screen.name in self._screens:
            raise DefinitionError(f"Screen already registered: {screen.name}")
        self._screens[screen.name] = screen

    def remove(self, name: str) -> Screen:
        try:
            return self._screens.pop(name)
        except KeyError:
            raise DefinitionError(f"Screen not registered: {name}") from None

    def lookup(self, name: str) -> Screen | None:
        return self._screens.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._screens

    def __iter__(self) -> Iterator[Screen]:
        return iter(list(self._screens.values()))

    def __len__(self) -> int:
        return len(self._screens)


class ScreenManager:
    """Switches between the main view and at most one overlay screen."""

    def __init__(self, session: ConsoleSession) -> None:
        self._session = session
        self.on_main_screen = True
        self.active_screen: Screen | None = None

    def show(self, screen: Screen) -> None:
        """Hand the terminal to *screen*."""
        session = self._session
        terminal = session.terminal
        if terminal is None:
            return

        with session.lock:
            if self.active_screen is not None:
                self.active_screen.stop()
            terminal.clear_screen()
            terminal.hide_cursor()
            self.on_main_screen = False
            self.active_screen = screen
            logger.debug("switched to screen %r", screen.name)
            try:
                screen.start()
            except Exception:
                self.show_main()
                raise

    def show_main(self) -> None:
        """Leave the overlay and repaint the main view from the scrollback."""
        session = self._session
        terminal = session.terminal
        if terminal is None:
            return

        with session.lock:
            screen = self.active_screen
            self.on_main_screen = True
            self.active_screen = None
            try:
                if screen is not None:
                    screen.stop()
            finally:
                # The main view comes back even when the overlay fails to stop
                terminal.show_cursor()
                terminal.reset_colors()
                logger.debug("returned to main screen")
                try:
                    self._repaint()
                except (RuntimeError, IndexError):
                    # Output kept arriving while we repainted; the next write redraws
                    logger.debug("scrollback changed during repaint", exc_info=True)

    def _repaint(self) -> None:
        session = self._session
        terminal = session.terminal
        terminal.clear_screen()
        for line in session.scrollback:
            terminal.set_foreground(line.foreground)
            terminal.set_background(line.background)
            terminal.write(line.text)
        terminal.reset_colors()
        session.prompt.top = terminal.cursor_top
        session.editor.draw_input_line()
