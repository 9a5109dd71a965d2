"""Console session: the context object that owns every console component.

A session ties a terminal to the scrollback, the prompt, the registries of
commands, CVars and screens, and the key-reading listener. Without a
terminal (headless) every drawing and writing operation is a silent no-op;
registries and command execution still work.
"""

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from termshell.builtins import register_builtins
from termshell.commands import CommandCallback, CommandRegistry
from termshell.config import SessionConfig
from termshell.cvars import CVarStore
from termshell.dialect import TerminalDialect, resolve_dialect
from termshell.dispatcher import CommandDispatcher
from termshell.editor import InputEditor
from termshell.errors import DefinitionError
from termshell.history import HistoryRing
from termshell.interceptor import ConsoleStream, OutputInterceptor, open_text_stream
from termshell.renderer import ConsoleRenderer, PromptState
from termshell.screens import Screen, ScreenManager, ScreenRegistry
from termshell.scrollback import ScrollbackLog
from termshell.terminal import Color, Terminal, open_terminal

logger = logging.getLogger(__name__)

try:
    VERSION = version("termshell")
except PackageNotFoundError:
    VERSION = "0.0.0"


class ConsoleSession:
    """An interactive console bound to one terminal.

    Lock order: ``_write_lock`` (session writes), then the output stream's
    buffer lock, then ``lock`` (scrollback, prompt and editor state). Code
    holding ``lock`` never writes through the output stream.
    """

    def __init__(
        self,
        terminal: Terminal | None = None,
        config: SessionConfig | None = None,
        *,
        dialect: TerminalDialect | None = None,
        headless: bool = False,
    ) -> None:
        if terminal is None and not headless:
            terminal = open_terminal()
        self.terminal = terminal
        self.config = config or SessionConfig()
        self.dialect = dialect or resolve_dialect(self.config.dialect)

        self.lock = threading.RLock()
        self._write_lock = threading.Lock()
        self._local = threading.local()
        self.suppress_timestamps = False

        self.prompt = PromptState()
        self.scrollback = ScrollbackLog(1)
        self.renderer = ConsoleRenderer(
            terminal, self.dialect, self.scrollback, self.config.log_margin
        )
        self.scrollback.max_lines = self.renderer.max_log_lines()
        self.history = HistoryRing(self.config.history_length)

        self.commands = CommandRegistry()
        self.cvars = CVarStore()
        self.screen_registry = ScreenRegistry()
        self.screens = ScreenManager(self)
        self.editor = InputEditor(self)
        self.dispatcher = CommandDispatcher(self)

        self.stream = ConsoleStream()
        self.stream.add_observer(OutputInterceptor(self))
        self.stdout = open_text_stream(self.stream, self.config.encoding)
        self._saved_stdout: Any = None

        self._started = False
        self._listening = False
        self._listener: threading.Thread | None = None

        register_builtins(self)

    # -- properties ---------------------------------------------------------

    @property
    def handle_exists(self) -> bool:
        return self.terminal is not None

    @property
    def started(self) -> bool:
        return self._started

    @property
    def listening(self) -> bool:
        return self._listening

    @property
    def on_main_screen(self) -> bool:
        return self.screens.on_main_screen

    @property
    def active_screen(self) -> Screen | None:
        return self.screens.active_screen

    @property
    def rows(self) -> int:
        return self.terminal.rows if self.terminal is not None else 0

    @property
    def title(self) -> str:
        return self.config.title

    @title.setter
    def title(self, value: str) -> None:
        self.config.title = value
        if self.terminal is not None:
            self.terminal.set_title(value)

    @property
    def prepend_timestamp(self) -> bool:
        return self.config.prepend_timestamp

    @prepend_timestamp.setter
    def prepend_timestamp(self, value: bool) -> None:
        self.config.prepend_timestamp = value

    @property
    def allow_cmd_history(self) -> bool:
        return self.config.allow_cmd_history

    @allow_cmd_history.setter
    def allow_cmd_history(self, value: bool) -> None:
        self.config.allow_cmd_history = value
        self.commands.set_hidden("cmd-history", not value)

    @property
    def allow_cmd_exit(self) -> bool:
        return self.config.allow_cmd_exit

    @allow_cmd_exit.setter
    def allow_cmd_exit(self, value: bool) -> None:
        self.config.allow_cmd_exit = value
        self.commands.set_hidden("cmd-exit", not value)

    # -- lifecycle ------------------------------------------------------------

    def start(self, redirect_stdout: bool = True) -> None:
        """Take over the terminal and draw the prompt.

        With *redirect_stdout*, ``sys.stdout`` is replaced by the session's
        stream so that ``print()`` output lands above the prompt.
        """
        if self.terminal is None or self._started:
            return

        self.terminal.start()
        self.terminal.set_title(self.config.title)
        with self.lock:
            self.terminal.clear_screen()
            self.prompt.top = 0
            self.prompt.anchor = 0
        if redirect_stdout:
            self._saved_stdout = sys.stdout
            sys.stdout = self.stdout
        self._started = True
        logger.debug("session started (redirect_stdout=%s)", redirect_stdout)

        self.write_important("Started termshell v{0}", VERSION)
        self.editor.draw_input_line()

    def stop(self) -> None:
        """Stop listening, restore ``sys.stdout`` and release the terminal."""
        if self.terminal is None or not self._started:
            return

        self.stop_listening()
        self.stdout.flush()
        if self._saved_stdout is not None:
            if sys.stdout is self.stdout:
                sys.stdout = self._saved_stdout
            self._saved_stdout = None
        self.terminal.stop()
        self._started = False
        logger.debug("session stopped")

    def listen(self, background: bool = False) -> None:
        """Read keys until :meth:`stop_listening` is called or input ends.

        With *background*, the loop runs on a daemon thread and this returns
        immediately.
        """
        if self.terminal is None or self._listening:
            return

        self._listening = True
        if background:
            self._listener = threading.Thread(
                target=self._listen_loop, name="termshell-listener", daemon=True
            )
            self._listener.start()
        else:
            self._listen_loop()

    def stop_listening(self) -> None:
        if self.terminal is None:
            return
        self._listening = False

    def _listen_loop(self) -> None:
        logger.debug("listening for keys")
        try:
            while self._listening:
                try:
                    event = self.terminal.read_key()
                except EOFError:
                    logger.debug("input closed, leaving listen loop")
                    break

                if not self.screens.on_main_screen:
                    if event.key == "escape":
                        self.screens.show_main()
                    continue
                self.editor.handle_key(event)
        finally:
            self._listening = False
            logger.debug("listen loop finished")

    def wait(self, timeout: float | None = None) -> None:
        """Block until a background listener has finished."""
        if self._listener is not None:
            self._listener.join(timeout)

    # -- commands -------------------------------------------------------------

    def submit_line(self, text: str) -> None:
        """Execute *text* as if it had been typed at the prompt."""
        self.dispatcher.execute(text)

    execute_command = submit_line

    def add_command(
        self, name: str, callback: CommandCallback, help: str = "", syntax: str = ""
    ) -> None:
        self.commands.add(name, callback, help, syntax)

    def remove_command(self, name: str) -> None:
        self.commands.remove(name)

    def is_command_defined(self, name: str) -> bool:
        return name in self.commands

    def show_syntax(self, name: str) -> None:
        self.dispatcher.show_syntax(name)

    @staticmethod
    def combine_args(args: list[str], separator: str = " ") -> str:
        return separator.join(args)

    # -- CVars ------------------------------------------------------------------

    def add_cvar(self, name: str, value: Any, dtype: type | None = None) -> None:
        self.cvars.add(name, value, dtype)

    def set_cvar(self, name: str, value: Any) -> None:
        self.cvars.set(name, value)

    def get_cvar(self, name: str) -> Any:
        return self.cvars.value(name)

    def try_get_cvar(self, name: str, default: Any = None) -> Any:
        cvar = self.cvars.get(name)
        return cvar.value if cvar is not None else default

    def remove_cvar(self, name: str) -> None:
        self.cvars.remove(name)

    def is_cvar_defined(self, name: str) -> bool:
        return name in self.cvars

    # -- screens -----------------------------------------------------------------

    def add_screen(self, screen: Screen) -> None:
        self.screen_registry.add(screen)

    def remove_screen(self, name: str) -> None:
        screen = self.screen_registry.lookup(name)
        if screen is not None and screen is self.screens.active_screen:
            self.screens.show_main()
        self.screen_registry.remove(name)

    def switch_screen(self, name: str | None) -> None:
        """Show the overlay called *name*, or the main view for ``None``."""
        if self.terminal is None:
            return
        if name is None:
            self.screens.show_main()
            return
        screen = self.screen_registry.lookup(name)
        if screen is None:
            raise DefinitionError(f"Screen not registered: {name}")
        self.screens.show(screen)

    # -- drawing ------------------------------------------------------------------

    def clear(self) -> None:
        """Clear the terminal and the scrollback and redraw the prompt."""
        if self.terminal is None:
            return
        with self.lock:
            self.terminal.clear_screen()
            self.scrollback.clear()
            self.prompt.top = 0
            self.prompt.anchor = 0
            self.editor.draw_input_line()

    def output_colors(self) -> tuple[Color, Color]:
        """Colours for the write in progress on this thread."""
        foreground = getattr(self._local, "foreground", None)
        if foreground is not None:
            return foreground, Color.DEFAULT
        if self.terminal is None:
            return Color.DEFAULT, Color.DEFAULT
        return self.terminal.foreground, self.terminal.background

    # -- writing ------------------------------------------------------------------

    @staticmethod
    def _format(msg: Any, args: tuple[Any, ...]) -> str:
        text = str(msg)
        return text.format(*args) if args else text

    def _emit(self, text: str, color: Color | None) -> None:
        with self._write_lock:
            self._local.foreground = color or Color.WHITE
            try:
                self.stdout.write(text)
                self.stdout.flush()
            finally:
                self._local.foreground = None

    def write(self, msg: Any, *args: Any, color: Color | None = None) -> None:
        """Write *msg* without a newline or timestamp."""
        if self.terminal is None:
            return
        self._emit(self._format(msg, args), color)

    def write_line(
        self,
        msg: Any,
        *args: Any,
        color: Color | None = None,
        timestamped: bool | None = None,
    ) -> None:
        """Write *msg* on its own line, prefixed with ``[time]`` unless
        timestamps are off or suppressed during command dispatch."""
        if self.terminal is None:
            return
        text = self._format(msg, args)
        if timestamped is None:
            timestamped = self.config.prepend_timestamp
        if timestamped and not self.suppress_timestamps:
            stamp = datetime.now().strftime(self.config.timestamp_format)
            text = f"[{stamp}] {text}"
        self._emit(text + "\n", color)

    def write_standard(self, msg: Any, *args: Any) -> None:
        self.write_line(msg, *args, color=Color.WHITE)

    def write_important(self, msg: Any, *args: Any) -> None:
        self.write_line(msg, *args, color=Color.CYAN)

    def write_warning(self, msg: Any, *args: Any) -> None:
        self.write_line(msg, *args, color=Color.YELLOW)

    def write_error(self, msg: Any, *args: Any) -> None:
        """Write an error line; *msg* may be an exception."""
        if isinstance(msg, BaseException):
            self.write_line(f"{type(msg).__name__}: {msg}", color=Color.RED)
            return
        self.write_line(msg, *args, color=Color.RED)
