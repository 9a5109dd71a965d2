"""Registry of named console commands."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Callable

from termshell.errors import DefinitionError

CommandCallback = Callable[[list[str]], None]


@dataclass
class Command:
    """A registered command.

    ``hide_in_help`` keeps it out of the ``help`` listing; ``core`` commands
    cannot be removed.
    """

    name: str
    help: str
    syntax: str
    callback: CommandCallback
    hide_in_help: bool = False
    core: bool = False


class CommandRegistry:
    """Commands by name, in registration order."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def add(
        self,
        name: str,
        callback: CommandCallback,
        help: str = "",
        syntax: str = "",
        *,
        core: bool = False,
    ) -> Command:
        """Register a command.

        A command without help text is hidden in ``help``; a missing syntax
        defaults to the bare name.
        """
        if name in self._commands:
            raise DefinitionError(f"Command already registered: {name}")
        help = help if help and not help.isspace() else ""
        command = Command(
            name=name,
            help=help,
            syntax=syntax if syntax and not syntax.isspace() else name,
            callback=callback,
            hide_in_help=not help,
            core=core,
        )
        self._commands[name] = command
        return command

    def remove(self, name: str) -> None:
        command = self._commands.get(name)
        if command is None:
            raise DefinitionError(f"Command does not exist: {name}")
        if command.core:
            raise DefinitionError(f"Cannot unregister a core command: {name}")
        del self._commands[name]

    def lookup(self, name: str) -> Command | None:
        return self._commands.get(name)

    def is_core(self, name: str) -> bool:
        command = self._commands.get(name)
        return command is not None and command.core

    def set_hidden(self, name: str, hidden: bool) -> None:
        command = self._commands.get(name)
        if command is not None:
            command.hide_in_help = hidden

    def mark_core(self, name: str) -> None:
        command = self._commands.get(name)
        if command is not None:
            command.core = True

    def list(self) -> list[Command]:
        return list(self._commands.values())

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._commands)
