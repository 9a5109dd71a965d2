"""Tests for termshell.cvars and termshell.commands registries."""

from __future__ import annotations

import pytest

from termshell.commands import CommandRegistry
from termshell.cvars import CVarStore, convert_value
from termshell.errors import CVarTypeError, DefinitionError


class TestConvertValue:
    def test_int(self) -> None:
        assert convert_value("v", "12", int) == 12

    def test_float(self) -> None:
        assert convert_value("v", "1.5", float) == 1.5

    def test_bool_words(self) -> None:
        assert convert_value("v", "yes", bool) is True
        assert convert_value("v", "OFF", bool) is False

    def test_bool_rejects_other_words(self) -> None:
        with pytest.raises(CVarTypeError):
            convert_value("v", "sure", bool)

    def test_failure_carries_details(self) -> None:
        with pytest.raises(CVarTypeError) as info:
            convert_value("volume", "abc", int)
        assert info.value.name == "volume"
        assert info.value.value == "abc"
        assert info.value.dtype is int


class TestCVarStore:
    def test_type_is_fixed_at_declaration(self) -> None:
        store = CVarStore()
        store.add("volume", 10)
        assert store.assign("volume", "11") is True
        assert store.value("volume") == 11
        assert store.assign("volume", "eleven") is False
        assert store.value("volume") == 11

    def test_explicit_type(self) -> None:
        store = CVarStore()
        store.add("ratio", "0.5", float)
        assert store.value("ratio") == 0.5

    def test_assign_missing(self) -> None:
        assert CVarStore().assign("nope", "1") is False

    def test_none_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            CVarStore().add("v", None)

    def test_ordered_by_name(self) -> None:
        store = CVarStore()
        for name in ("b", "c", "a"):
            store.add(name, 1)
        assert [cvar.name for cvar in store.ordered_by_name()] == ["a", "b", "c"]
        assert store.names() == ["b", "c", "a"]


class TestCommandRegistry:
    def test_missing_help_hides_command(self) -> None:
        registry = CommandRegistry()
        command = registry.add("quiet", lambda args: None)
        assert command.hide_in_help
        assert command.syntax == "quiet"

    def test_blank_syntax_defaults_to_name(self) -> None:
        registry = CommandRegistry()
        assert registry.add("x", lambda args: None, "Help.", "   ").syntax == "x"

    def test_core_commands_are_permanent(self) -> None:
        registry = CommandRegistry()
        registry.add("base", lambda args: None, "Base.", core=True)
        with pytest.raises(DefinitionError):
            registry.remove("base")

    def test_mark_core(self) -> None:
        registry = CommandRegistry()
        registry.add("later", lambda args: None, "Later.")
        registry.mark_core("later")
        assert registry.is_core("later")

    def test_set_hidden(self) -> None:
        registry = CommandRegistry()
        registry.add("shown", lambda args: None, "Shown.")
        registry.set_hidden("shown", True)
        assert registry.lookup("shown").hide_in_help
