from __future__ import annotations

import pytest

from termshell.config import SessionConfig
from termshell.dialect import LINE_BUFFERED
from termshell.session import ConsoleSession

from .virtual_terminal import VirtualTerminal


@pytest.fixture
def terminal():
    """A 24x80 in-memory terminal."""
    return VirtualTerminal(rows=24, columns=80)


@pytest.fixture
def config():
    """Session config without timestamps so output lines are predictable."""
    return SessionConfig(prepend_timestamp=False, dialect="line-buffered")


@pytest.fixture
def session(terminal, config):
    """A started session that leaves sys.stdout alone."""
    console = ConsoleSession(terminal, config, dialect=LINE_BUFFERED)
    console.start(redirect_stdout=False)
    yield console
    console.stop()


@pytest.fixture
def headless():
    """A session with no terminal at all."""
    return ConsoleSession(config=SessionConfig(prepend_timestamp=False), headless=True)
