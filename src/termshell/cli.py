"""CLI entry point for termshell. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from termshell.config import SessionConfig
from termshell.history import MAX_HISTORY_LENGTH
from termshell.log import ConsoleLogHandler
from termshell.screens import TextScreen
from termshell.session import VERSION, ConsoleSession

ABOUT_LINES = [
    "termshell keeps a prompt at the bottom of the terminal while output",
    "scrolls above it.",
    "",
    "Type 'help' for the list of commands, 'allvars' for the CVars,",
    "and 'cmd-exit' to leave.",
]


def build_demo_session(session: ConsoleSession) -> None:
    """Register the demo command, CVars and screen."""

    def echo(args: list[str]) -> None:
        session.write_standard(session.combine_args(args))

    session.add_command("echo", echo, "Prints its arguments.", "echo <text...>")
    session.add_cvar("volume", 10)
    session.add_cvar("name", "termshell")
    session.add_screen(
        TextScreen("about", "What this console is.", ABOUT_LINES, session.terminal)
    )


@click.command()
@click.version_option(VERSION, prog_name="termshell")
@click.option("--no-timestamps", is_flag=True, help="Do not prefix output lines with the time.")
@click.option(
    "--history-length",
    type=click.IntRange(1, MAX_HISTORY_LENGTH),
    default=None,
    help="Number of command lines kept in the history.",
)
@click.option(
    "--dialect",
    type=click.Choice(["auto", "line-buffered", "windowed"]),
    default=None,
    help="Terminal dialect (default: detect).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    show_default=True,
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also log to this file.")
def main(no_timestamps, history_length, dialect, log_level, log_file):
    """Interactive console with a persistent prompt."""
    config = SessionConfig.from_env()
    if no_timestamps:
        config.prepend_timestamp = False
    if history_length is not None:
        config.history_length = history_length
    if dialect is not None:
        config.dialect = dialect

    session = ConsoleSession(config=config)
    if not session.handle_exists:
        click.echo("termshell needs an interactive terminal.", err=True)
        sys.exit(1)

    # Records go above the prompt; stderr would tear through the screen
    handlers: list[logging.Handler] = [ConsoleLogHandler(session)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )

    build_demo_session(session)
    session.start()
    try:
        session.listen()
    finally:
        session.stop()
        logging.getLogger().removeHandler(handlers[0])


if __name__ == "__main__":
    main()
