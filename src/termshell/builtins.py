"""Commands every console session provides."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from termshell.history import MAX_HISTORY_LENGTH

if TYPE_CHECKING:
    from termshell.session import ConsoleSession

logger = logging.getLogger(__name__)

NAME_COLUMN = 20
SYNTAX_HINT = (
    "\nYou can also use the argument --syntax or --? for each command, "
    "to view that commands syntax.\n"
)


def register_builtins(session: ConsoleSession) -> None:
    """Register the built-in commands on *session* and mark them core."""

    def help_command(args: list[str]) -> None:
        session.write_standard("Defined Commands ({0}):\n", len(session.commands))
        for command in session.commands:
            if not command.hide_in_help:
                session.write_standard(command.name.ljust(NAME_COLUMN) + command.help)
        session.write_important(SYNTAX_HINT)

    def screens_command(args: list[str]) -> None:
        session.write_standard("Defined Screens ({0}):\n", len(session.screen_registry))
        for screen in session.screen_registry:
            session.write_standard(screen.name.ljust(NAME_COLUMN) + screen.description)
        session.write_standard("")

    def screen_command(args: list[str]) -> None:
        name = session.combine_args(args)
        if not name:
            session.switch_screen(None)
        elif name in session.screen_registry:
            session.switch_screen(name)
        else:
            session.write_error("Screen '{0}' is not defined.", name)

    def cls_command(args: list[str]) -> None:
        session.clear()

    def allvars_command(args: list[str]) -> None:
        page = 0
        if args:
            try:
                page = int(args[0])
            except ValueError:
                page = 0

        cvars = session.cvars.ordered_by_name()
        per_page = max(session.rows - 2, 1)
        last_page = max(math.ceil(len(cvars) / per_page) - 1, 0)
        page = max(min(page, last_page), 0)

        session.write_important("-- -- CVars (Page: {0} of {1}) -- --", page, last_page)
        if cvars:
            for cvar in cvars[per_page * page : per_page * (page + 1)]:
                session.write_line("{0}= {1}", cvar.name.ljust(NAME_COLUMN), cvar.value)
        else:
            session.write_line("There are no CVars defined!")
        session.write_line("")

    def cmd_history_command(args: list[str]) -> None:
        if not session.allow_cmd_history:
            session.write_error("Command not allowed.")
            return
        if not args:
            session.write_error("Wrong number of arguments")
            return

        length = int(args[0])
        if not 1 <= length <= MAX_HISTORY_LENGTH:
            session.write_error("Invalid length: must be between 1 and {0}", MAX_HISTORY_LENGTH)
            return
        session.history.max_length = length
        logger.debug("history length set to %d", length)

    def cmd_exit_command(args: list[str]) -> None:
        if not session.allow_cmd_exit:
            session.write_error("Command not allowed.")
            return
        session.stop_listening()

    builtins = [
        ("help", help_command, "Displays all defined commands.", ""),
        ("screens", screens_command, "Displays all registered screens.", ""),
        (
            "screen",
            screen_command,
            "Switches to a screen.",
            "screen [screen name] (when name not provided, it goes back to main screen)",
        ),
        ("cls", cls_command, "Clears the screen.", ""),
        ("allvars", allvars_command, "Prints a list of all available CVars.", "allvars [page]"),
        (
            "cmd-history",
            cmd_history_command,
            "Sets the length of the history.",
            f"cmd-history <length [1 - {MAX_HISTORY_LENGTH}]>",
        ),
        ("cmd-exit", cmd_exit_command, "Exits the console.", ""),
    ]
    for name, callback, help, syntax in builtins:
        session.commands.add(name, callback, help, syntax, core=True)

    session.commands.set_hidden("cmd-history", not session.allow_cmd_history)
    session.commands.set_hidden("cmd-exit", not session.allow_cmd_exit)
