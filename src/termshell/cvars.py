"""Typed console variables (CVars)."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Callable

from termshell.errors import CVarTypeError, DefinitionError

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


@dataclass
class CVar:
    """A named value whose type is fixed when it is first declared."""

    name: str
    dtype: type
    value: Any


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"not a boolean: {value!r}")
    return bool(value)


_CONVERTERS: dict[type, Callable[[Any], Any]] = {
    bool: _to_bool,
    int: int,
    float: float,
    str: str,
}


def convert_value(name: str, value: Any, dtype: type) -> Any:
    """Convert *value* to *dtype*, raising :class:`CVarTypeError` on failure."""
    if type(value) is dtype:
        return value
    converter = _CONVERTERS.get(dtype, dtype)
    try:
        return converter(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise CVarTypeError(name, value, dtype) from exc


class CVarStore:
    """CVars by name."""

    def __init__(self) -> None:
        self._vars: dict[str, CVar] = {}

    def add(self, name: str, value: Any, dtype: type | None = None) -> CVar:
        """Declare a new CVar; its type is *dtype* or the type of *value*."""
        if name is None:
            raise ValueError("name must not be None")
        if value is None:
            raise ValueError("value must not be None")
        if name in self._vars:
            raise DefinitionError(f'CVar "{name}" already exists!')
        dtype = dtype or type(value)
        cvar = CVar(name, dtype, convert_value(name, value, dtype))
        self._vars[name] = cvar
        return cvar

    def set(self, name: str, value: Any) -> CVar:
        """Set an existing CVar, converting *value* to its declared type,
        or declare it if it does not exist yet."""
        if value is None:
            raise ValueError("value must not be None")
        cvar = self._vars.get(name)
        if cvar is None:
            return self.add(name, value)
        cvar.value = convert_value(name, value, cvar.dtype)
        return cvar

    def assign(self, name: str, value: Any) -> bool:
        """Convert and store *value* into an existing CVar.

        Returns ``False`` if the CVar does not exist or conversion fails.
        """
        cvar = self._vars.get(name)
        if cvar is None:
            return False
        try:
            cvar.value = convert_value(name, value, cvar.dtype)
        except CVarTypeError:
            return False
        return True

    def get(self, name: str) -> CVar | None:
        return self._vars.get(name)

    def value(self, name: str) -> Any:
        """Return the value of *name*; raises :class:`DefinitionError` if missing."""
        cvar = self._vars.get(name)
        if cvar is None:
            raise DefinitionError(f'CVar "{name}" does not exist!')
        return cvar.value

    def remove(self, name: str) -> None:
        if name not in self._vars:
            raise DefinitionError(f'Failed to remove CVar "{name}", it does not exist!')
        del self._vars[name]

    def ordered_by_name(self) -> list[CVar]:
        return [self._vars[name] for name in sorted(self._vars)]

    def names(self) -> list[str]:
        return list(self._vars)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[CVar]:
        return iter(list(self._vars.values()))

    def __len__(self) -> int:
        return len(self._vars)
