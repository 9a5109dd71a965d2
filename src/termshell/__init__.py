"""termshell: interactive terminal console with a persistent prompt."""

# Commands and CVars
from termshell.commands import Command, CommandCallback, CommandRegistry
from termshell.cvars import CVar, CVarStore

# Configuration
from termshell.config import SessionConfig

# Terminal dialects
from termshell.dialect import LINE_BUFFERED, WINDOWED, TerminalDialect, resolve_dialect

# Errors
from termshell.errors import ConsoleError, CVarTypeError, DefinitionError, DispatchError

# Keyboard input handling
from termshell.keys import Key, KeyEvent, parse_key

# Logging integration
from termshell.log import ConsoleLogHandler

# Overlay screens
from termshell.screens import Screen, TextScreen

# Session
from termshell.session import VERSION, ConsoleSession

# Terminal interface and implementations
from termshell.terminal import Color, ProcessTerminal, Terminal, open_terminal

# Utilities
from termshell.utils import visible_width

__version__ = VERSION

__all__ = [
    # Commands and CVars
    "Command",
    "CommandCallback",
    "CommandRegistry",
    "CVar",
    "CVarStore",
    # Configuration
    "SessionConfig",
    # Terminal dialects
    "LINE_BUFFERED",
    "WINDOWED",
    "TerminalDialect",
    "resolve_dialect",
    # Errors
    "ConsoleError",
    "CVarTypeError",
    "DefinitionError",
    "DispatchError",
    # Keys
    "Key",
    "KeyEvent",
    "parse_key",
    # Logging
    "ConsoleLogHandler",
    # Screens
    "Screen",
    "TextScreen",
    # Session
    "ConsoleSession",
    "VERSION",
    # Terminal
    "Color",
    "ProcessTerminal",
    "Terminal",
    "open_terminal",
    # Utilities
    "visible_width",
]
