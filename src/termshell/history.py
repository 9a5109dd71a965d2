"""Ring of previously submitted command lines."""

from __future__ import annotations

DEFAULT_HISTORY_LENGTH = 30
MAX_HISTORY_LENGTH = 300


class HistoryRing:
    """Submitted lines, most recent first, capped at ``max_length``.

    ``index`` tracks history browsing: -1 means "not browsing", 0 is the
    most recent entry.
    """

    def __init__(self, max_length: int = DEFAULT_HISTORY_LENGTH) -> None:
        if max_length < 1:
            raise ValueError("history length must be at least 1")
        self._entries: list[str] = []
        self._max_length = max_length
        self.index = -1

    @property
    def max_length(self) -> int:
        return self._max_length

    @max_length.setter
    def max_length(self, value: int) -> None:
        if value < 1:
            raise ValueError("history length must be at least 1")
        self._max_length = value
        del self._entries[value:]
        self.index = min(self.index, len(self._entries) - 1)

    def push(self, line: str) -> bool:
        """Prepend *line* unless it equals the current head.

        Returns ``True`` if the ring grew.
        """
        if self._entries and self._entries[0] == line:
            return False
        self._entries.insert(0, line)
        if len(self._entries) > self._max_length:
            self._entries.pop()
        return True

    def reset_index(self) -> None:
        self.index = -1

    def older(self, current: str) -> str | None:
        """Step toward older entries and return the entry to show.

        If the shown entry was edited, the same entry is offered again first.
        Returns ``None`` when there is nothing to show.
        """
        if self.index != -1 and (not self._entries or current != self._entries[self.index]):
            self.index = max(-1, self.index - 1)

        if self.index + 1 < len(self._entries):
            self.index += 1

        if 0 <= self.index < len(self._entries):
            return self._entries[self.index]
        return None

    def newer(self) -> str | None:
        """Step toward newer entries.

        Returns the entry to show, ``""`` once browsing ends, or ``None``
        when not browsing.
        """
        if self.index == -1:
            return None
        self.index -= 1
        if self.index == -1:
            return ""
        return self._entries[self.index]

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]
