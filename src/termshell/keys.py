"""Keyboard input parsing for the console editor.

Raw terminal input arrives as chunks that may hold several keys or only part
of an escape sequence. ``split_sequences`` cuts a chunk into complete key
presses and ``parse_key`` names each one, so the editor only ever sees
:class:`KeyEvent` values such as ``"left"``, ``"ctrl+a"`` or ``"x"``.
"""

from __future__ import annotations

from dataclasses import dataclass

import grapheme

ESC = "\x1b"


class Key:
    """Key names the editor binds to."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    home = "home"
    end = "end"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


# Final byte of a CSI or SS3 sequence -> key
_FINAL_KEYS = {
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
    "H": Key.home,
    "F": Key.end,
}

# ``ESC [ n ~`` codes (vt220 editing keypad)
_TILDE_KEYS = {
    1: Key.home,
    2: "insert",
    3: Key.delete,
    4: Key.end,
    5: "pageUp",
    6: "pageDown",
    7: Key.home,
    8: Key.end,
}

# xterm modifier parameter is 1 + (shift=1 | alt=2 | ctrl=4)
_MODIFIER_BITS = ((4, "ctrl+"), (2, "alt+"), (1, "shift+"))

_SINGLE_KEYS = {
    ESC: Key.escape,
    "\r": Key.enter,
    "\n": Key.enter,
    "\r\n": Key.enter,
    "\t": Key.tab,
    " ": Key.space,
    "\x7f": Key.backspace,
    "\x08": Key.backspace,
    "\x00": "ctrl+space",
}


@dataclass(frozen=True)
class KeyEvent:
    """One key press.

    ``key`` is the parsed key name (``None`` when the sequence is not
    recognised), ``char`` the raw text it came from. ``is_control`` is true
    for anything that must not be inserted into the edit buffer.
    """

    key: str | None
    char: str
    is_control: bool

    @property
    def printable(self) -> bool:
        return not self.is_control and bool(self.char)


def is_control_text(data: str) -> bool:
    """Return ``True`` if *data* holds any C0/C1 control character."""
    return any(ord(ch) < 32 or 0x7F <= ord(ch) <= 0x9F for ch in data)


def key_event(data: str) -> KeyEvent:
    """Build a :class:`KeyEvent` from one complete input sequence."""
    return KeyEvent(key=parse_key(data), char=data, is_control=is_control_text(data))


# ---------------------------------------------------------------------------
# Sequence splitting
# ---------------------------------------------------------------------------


def _escape_length(data: str) -> int:
    """Length of the escape sequence at the start of *data*, 0 if incomplete."""
    if len(data) < 2:
        return 0
    kind = data[1]
    if kind == "[":
        # CSI: parameter bytes then one final byte in 0x40-0x7E
        for end in range(2, len(data)):
            if 0x40 <= ord(data[end]) <= 0x7E:
                return end + 1
        return 0
    if kind == "O":
        return 3 if len(data) >= 3 else 0
    if kind == "]":
        # OSC ends with BEL or ST
        for end in range(2, len(data)):
            if data[end] == "\x07":
                return end + 1
            if data[end - 1 : end + 1] == ESC + "\\":
                return end + 1
        return 0
    # ESC + one character: alt+key
    return 2


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split accumulated input into key presses.

    Plain text is split into grapheme clusters, so a combining accent stays
    with its base character and ``"\\r\\n"`` is one enter. Returns
    ``(sequences, remainder)`` where *remainder* is a trailing escape
    sequence that still needs more input.
    """
    sequences: list[str] = []
    pos = 0
    while pos < len(buffer):
        if buffer[pos] != ESC:
            end = buffer.find(ESC, pos)
            if end == -1:
                end = len(buffer)
            sequences.extend(grapheme.graphemes(buffer[pos:end]))
            pos = end
            continue

        length = _escape_length(buffer[pos:])
        if length == 0:
            return sequences, buffer[pos:]
        sequences.append(buffer[pos : pos + length])
        pos += length
    return sequences, ""


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def _modifier_prefix(param: str) -> str:
    try:
        bits = int(param) - 1
    except ValueError:
        return ""
    return "".join(prefix for bit, prefix in _MODIFIER_BITS if bits & bit)


def _parse_escape(data: str) -> str | None:
    kind, body = data[1], data[2:]
    if kind == "O" and len(body) == 1:
        return _FINAL_KEYS.get(body)
    if kind != "[" or not body:
        if len(data) == 2 and data[1].isprintable():
            return "alt+" + data[1].lower()
        if data[1:] in ("\x7f", "\x08"):
            return "alt+backspace"
        return None

    final, params = body[-1], body[:-1].split(";")
    if final == "Z":
        return "shift+tab"
    if final == "~":
        try:
            name = _TILDE_KEYS.get(int(params[0]))
        except ValueError:
            return None
    else:
        name = _FINAL_KEYS.get(final)
    if name is None:
        return None
    prefix = _modifier_prefix(params[1]) if len(params) > 1 else ""
    return prefix + name


def parse_key(data: str) -> str | None:
    """Parse raw terminal input and return the key name, or ``None``.

    e.g. ``"a"``, ``"ctrl+a"``, ``"alt+b"``, ``"left"``, ``"ctrl+right"``.
    """
    if not data:
        return None
    if data in _SINGLE_KEYS:
        return _SINGLE_KEYS[data]
    if data.startswith(ESC):
        return _parse_escape(data)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)
    if len(data) == 1 and data.isprintable():
        return data
    return None
