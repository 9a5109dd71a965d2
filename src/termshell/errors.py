"""Exception types raised by the console runtime."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for console runtime errors."""


class DefinitionError(ConsoleError, ValueError):
    """A command, screen or CVar was registered twice, or is missing."""


class DispatchError(ConsoleError):
    """A command line could not be executed.

    Always caught at the dispatch boundary and rendered as an error line.
    """


class CVarTypeError(DispatchError, ValueError):
    """A value could not be converted to a CVar's declared type."""

    def __init__(self, name: str, value: object, dtype: type) -> None:
        super().__init__(f"cannot convert {value!r} to {dtype.__name__} for {name!r}")
        self.name = name
        self.value = value
        self.dtype = dtype
