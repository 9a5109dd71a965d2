"""Tests for termshell.builtins -- commands every session provides."""

from __future__ import annotations

from termshell.config import SessionConfig
from termshell.dialect import LINE_BUFFERED
from termshell.screens import TextScreen
from termshell.session import ConsoleSession
from termshell.terminal import Color

from .virtual_terminal import VirtualTerminal

BUILTINS = ["help", "screens", "screen", "cls", "allvars", "cmd-history", "cmd-exit"]


def texts(session: ConsoleSession) -> list[str]:
    return [line.text for line in session.scrollback]


def tall_session(rows: int = 60) -> ConsoleSession:
    """A session whose scrollback holds everything a command prints."""
    config = SessionConfig(prepend_timestamp=False, log_margin=0)
    console = ConsoleSession(VirtualTerminal(rows=rows, columns=80), config, dialect=LINE_BUFFERED)
    console.start(redirect_stdout=False)
    return console


class TestRegistration:
    def test_builtins_are_core(self, headless) -> None:
        for name in BUILTINS:
            assert headless.commands.is_core(name)

    def test_registration_order(self, headless) -> None:
        assert headless.commands.names() == BUILTINS


class TestHelp:
    def test_lists_visible_commands(self) -> None:
        console = tall_session()
        try:
            console.add_command("ping", lambda args: None, "Pings the server.")
            console.add_command("secret", lambda args: None)
            console.submit_line("help")
            lines = texts(console)
            start = lines.index("Defined Commands (9):\n\n")
            listed = lines[start + 1 : start + 9]
            assert listed == [
                "help                Displays all defined commands.\n",
                "screens             Displays all registered screens.\n",
                "screen              Switches to a screen.\n",
                "cls                 Clears the screen.\n",
                "allvars             Prints a list of all available CVars.\n",
                "cmd-history         Sets the length of the history.\n",
                "cmd-exit            Exits the console.\n",
                "ping                Pings the server.\n",
            ]
            assert lines[-1].startswith("\nYou can also use the argument --syntax or --?")
            assert console.scrollback[-1].foreground is Color.CYAN
        finally:
            console.stop()

    def test_disallowed_builtins_are_hidden(self) -> None:
        console = tall_session()
        try:
            console.allow_cmd_history = False
            console.allow_cmd_exit = False
            console.submit_line("help")
            joined = "".join(texts(console))
            assert "cmd-history" not in joined
            assert "cmd-exit" not in joined
            console.allow_cmd_exit = True
            assert not console.commands.lookup("cmd-exit").hide_in_help
        finally:
            console.stop()


class TestScreens:
    def test_lists_screens(self, session) -> None:
        session.add_screen(TextScreen("about", "About this console.", [], session.terminal))
        session.submit_line("screens")
        assert texts(session)[-3:] == [
            "Defined Screens (1):\n\n",
            "about               About this console.\n",
            "\n",
        ]


class TestCls:
    def test_clears_screen_and_scrollback(self, session) -> None:
        session.write_standard("old output")
        session.editor.set_text("typed")
        session.submit_line("cls")
        assert len(session.scrollback) == 0
        assert session.prompt.anchor == 0
        assert session.terminal.screen_text() == "#>"


class TestAllVars:
    def test_no_cvars(self, session) -> None:
        session.submit_line("allvars")
        assert texts(session)[-3:] == [
            "-- -- CVars (Page: 0 of 0) -- --\n",
            "There are no CVars defined!\n",
            "\n",
        ]

    def test_sorted_by_name(self, session) -> None:
        session.add_cvar("zoom", 2)
        session.add_cvar("alpha", "a")
        session.submit_line("allvars")
        assert texts(session)[-4:] == [
            "-- -- CVars (Page: 0 of 0) -- --\n",
            "alpha               = a\n",
            "zoom                = 2\n",
            "\n",
        ]

    def test_pages(self) -> None:
        # 12 rows -> 10 CVars per page
        console = tall_session(rows=12)
        try:
            for i in range(25):
                console.add_cvar(f"var{i:02d}", i)
            console.submit_line("allvars 2")
            lines = texts(console)
            assert lines[-7] == "-- -- CVars (Page: 2 of 2) -- --\n"
            assert lines[-6:-1] == [f"var{i:02d}               = {i}\n" for i in range(20, 25)]

            console.submit_line("allvars 99")
            assert texts(console)[-7] == "-- -- CVars (Page: 2 of 2) -- --\n"

            console.submit_line("allvars -3")
            assert "-- -- CVars (Page: 0 of 2) -- --\n" in texts(console)
        finally:
            console.stop()


class TestCmdHistory:
    def test_sets_history_length(self, session) -> None:
        session.submit_line("cmd-history 50")
        assert session.history.max_length == 50

    def test_missing_argument(self, session) -> None:
        session.submit_line("cmd-history")
        assert texts(session)[-1] == "Wrong number of arguments\n"

    def test_out_of_range(self, session) -> None:
        session.submit_line("cmd-history 301")
        assert texts(session)[-1] == "Invalid length: must be between 1 and 300\n"
        assert session.history.max_length == 30

    def test_not_a_number(self, session) -> None:
        session.submit_line("cmd-history lots")
        assert texts(session)[-1].startswith("ValueError: ")

    def test_refused_when_not_allowed(self, session) -> None:
        session.allow_cmd_history = False
        session.submit_line("cmd-history 50")
        assert texts(session)[-1] == "Command not allowed.\n"
        assert session.history.max_length == 30


class TestCmdExit:
    def test_stops_listening(self, session) -> None:
        session.terminal.type_text("cmd-exit\r")
        session.listen()
        assert not session.listening
