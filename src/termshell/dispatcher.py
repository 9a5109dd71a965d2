"""Command line tokenizing and routing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from termshell.commands import Command

if TYPE_CHECKING:
    from termshell.session import ConsoleSession

logger = logging.getLogger(__name__)

SYNTAX_FLAGS = frozenset({"--syntax", "--?", "/?"})


def split_commands(line: str) -> list[str]:
    """Split *line* on ``;`` into sub-commands.

    Leading whitespace of each sub-command is dropped; empty sub-commands
    are skipped.
    """
    commands: list[str] = []
    current: list[str] = []
    started = False
    for ch in line:
        if not ch.isspace():
            started = True
        if ch == ";":
            commands.append("".join(current))
            current = []
            started = False
        elif started:
            current.append(ch)
    commands.append("".join(current))
    return [command for command in commands if command]


def parse_command(command: str) -> tuple[str, list[str]]:
    """Split a sub-command into its name and arguments.

    Arguments are separated by single spaces with no collapsing, so
    ``"foo a  b"`` gives ``["a", "", "b"]``. Quotes are ordinary characters.
    """
    name, sep, rest = command.partition(" ")
    if not sep:
        return command, []
    return name, rest.split(" ")


class CommandDispatcher:
    """Routes command lines to commands and CVars."""

    def __init__(self, session: ConsoleSession) -> None:
        self._session = session

    def execute(self, line: str) -> None:
        """Record *line* in the history and dispatch each of its sub-commands."""
        session = self._session
        session.history.reset_index()
        session.history.push(line)
        session.editor.clear()

        session.suppress_timestamps = True
        try:
            for command in split_commands(line):
                self._dispatch(command)
        finally:
            session.suppress_timestamps = False
        session.editor.draw_input_line()

    def _dispatch(self, command: str) -> None:
        session = self._session
        name, args = parse_command(command)
        logger.debug("dispatching %r with %d argument(s)", name, len(args))

        registered = session.commands.lookup(name)
        if registered is not None:
            if args and args[0].lower() in SYNTAX_FLAGS:
                self._write_syntax(registered)
            else:
                self._run(registered, args)
            return

        if args and name in session.cvars:
            if session.cvars.assign(name, args[0]):
                session.write_standard("{0} -> {1}", name, args[0])
            else:
                session.write_error("Failed to change {0} to {1}. (Wrong datatype?)", name, args[0])
        elif not args and name in session.cvars:
            session.write_standard("{0} = {1}", name, session.cvars.value(name))
        else:
            session.write_error("Command not defined: {0}", name)

    def _run(self, command: Command, args: list[str]) -> None:
        try:
            command.callback(args)
        except Exception as exc:
            logger.debug("command %r raised", command.name, exc_info=True)
            self._session.write_error(exc)

    def show_syntax(self, name: str) -> None:
        command = self._session.commands.lookup(name)
        if command is None:
            self._session.write_error(
                "Failed to display syntax. Command '{0}' is not defined!", name
            )
            return
        self._write_syntax(command)

    def _write_syntax(self, command: Command) -> None:
        self._session.write_standard("Syntax: {0}", command.syntax)
