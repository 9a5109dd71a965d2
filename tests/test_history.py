"""Tests for termshell.history.HistoryRing -- submitted line history."""

from __future__ import annotations

import pytest

from termshell.history import HistoryRing


class TestHistoryPush:
    """push() prepends, deduplicates against the head and caps the ring."""

    def test_most_recent_first(self) -> None:
        ring = HistoryRing(5)
        ring.push("a")
        ring.push("b")
        assert ring.entries == ["b", "a"]

    def test_repeat_of_head_is_dropped(self) -> None:
        ring = HistoryRing(5)
        assert ring.push("a") is True
        assert ring.push("a") is False
        assert len(ring) == 1

    def test_repeat_of_older_entry_is_kept(self) -> None:
        ring = HistoryRing(5)
        ring.push("a")
        ring.push("b")
        ring.push("a")
        assert ring.entries == ["a", "b", "a"]

    def test_cap_evicts_oldest(self) -> None:
        ring = HistoryRing(2)
        for line in ("a", "b", "c"):
            ring.push(line)
        assert ring.entries == ["c", "b"]

    def test_shrinking_trims(self) -> None:
        ring = HistoryRing(5)
        for line in ("a", "b", "c"):
            ring.push(line)
        ring.max_length = 1
        assert ring.entries == ["c"]

    def test_invalid_length(self) -> None:
        with pytest.raises(ValueError):
            HistoryRing(0)


class TestHistoryBrowsing:
    """older() / newer() walk the ring from the prompt."""

    def make_ring(self) -> HistoryRing:
        ring = HistoryRing(5)
        ring.push("a")
        ring.push("b")
        return ring

    def test_starts_not_browsing(self) -> None:
        assert HistoryRing().index == -1

    def test_older_walks_back(self) -> None:
        ring = self.make_ring()
        assert ring.older("") == "b"
        assert ring.older("b") == "a"

    def test_older_stops_at_oldest(self) -> None:
        ring = self.make_ring()
        ring.older("")
        ring.older("b")
        assert ring.older("a") == "a"
        assert ring.index == 1

    def test_newer_walks_forward_then_clears(self) -> None:
        ring = self.make_ring()
        ring.older("")
        ring.older("b")
        assert ring.newer() == "b"
        assert ring.newer() == ""
        assert ring.index == -1

    def test_newer_when_not_browsing(self) -> None:
        ring = self.make_ring()
        assert ring.newer() is None

    def test_edited_entry_is_offered_again(self) -> None:
        ring = self.make_ring()
        assert ring.older("") == "b"
        assert ring.older("b edited") == "b"

    def test_older_on_empty_ring(self) -> None:
        assert HistoryRing().older("") is None

    def test_reset_index(self) -> None:
        ring = self.make_ring()
        ring.older("")
        ring.reset_index()
        assert ring.index == -1
