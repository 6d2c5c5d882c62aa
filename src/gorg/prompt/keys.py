"""Decoding of raw terminal input bytes into key events."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

ESC = 0x1B
BACKSPACE_BYTE = 0x7F

_READ_CHUNK_BYTES = 1024


class KeyCode(Enum):
    """Logical key kinds understood by the prompt."""

    CHAR = "char"
    CTRL = "ctrl"
    ALT = "alt"
    ENTER = "enter"
    TAB = "tab"
    BACKSPACE = "backspace"
    DELETE = "delete"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    CTRL_LEFT = "ctrl_left"
    CTRL_RIGHT = "ctrl_right"
    ALT_LEFT = "alt_left"
    ALT_RIGHT = "alt_right"
    UNKNOWN = "unknown"


@dataclass(slots=True, frozen=True)
class Key:
    """One key press. ``char`` is set for CHAR, CTRL, and ALT keys."""

    code: KeyCode
    char: str = ""

    @classmethod
    def of(cls, char: str) -> Key:
        return cls(KeyCode.CHAR, char)

    @classmethod
    def ctrl(cls, char: str) -> Key:
        return cls(KeyCode.CTRL, char)

    @classmethod
    def alt(cls, char: str) -> Key:
        return cls(KeyCode.ALT, char)


_ARROWS = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
}
_TILDE_CODES = {
    "1": KeyCode.HOME,
    "3": KeyCode.DELETE,
    "4": KeyCode.END,
    "7": KeyCode.HOME,
    "8": KeyCode.END,
}
_MODIFIED_ARROWS = {
    ("5", "C"): KeyCode.CTRL_RIGHT,
    ("5", "D"): KeyCode.CTRL_LEFT,
    ("3", "C"): KeyCode.ALT_RIGHT,
    ("3", "D"): KeyCode.ALT_LEFT,
}


class KeyDecoder:
    """Incremental decoder; keeps incomplete UTF-8 sequences between feeds.

    Escape sequences are expected to arrive within a single read, which is
    how terminals deliver them. A lone trailing ESC is reported as ESCAPE.
    """

    def __init__(self) -> None:
        self._pending = b""

    def feed(self, data: bytes) -> list[Key]:
        buffer = self._pending + data
        self._pending = b""
        keys: list[Key] = []
        pos = 0
        while pos < len(buffer):
            byte = buffer[pos]
            if byte == ESC:
                key, pos = _decode_escape(buffer, pos)
                keys.append(key)
                continue
            if byte < 0x80:
                keys.append(_decode_ascii(byte))
                pos += 1
                continue
            width = _utf8_width(byte)
            if width == 0:
                keys.append(Key(KeyCode.UNKNOWN))
                pos += 1
                continue
            if pos + width > len(buffer):
                self._pending = buffer[pos:]
                break
            try:
                char = buffer[pos : pos + width].decode("utf-8")
            except UnicodeDecodeError:
                keys.append(Key(KeyCode.UNKNOWN))
                pos += 1
                continue
            keys.append(Key.of(char))
            pos += width
        return keys


def read_keys(fd: int) -> Iterator[Key]:
    """Block on ``fd`` and yield decoded keys until end of input."""
    decoder = KeyDecoder()
    while True:
        data = os.read(fd, _READ_CHUNK_BYTES)
        if not data:
            return
        yield from decoder.feed(data)


def _decode_ascii(byte: int) -> Key:
    if byte in (0x0D, 0x0A):
        return Key(KeyCode.ENTER)
    if byte == 0x09:
        return Key(KeyCode.TAB)
    if byte == BACKSPACE_BYTE:
        return Key(KeyCode.BACKSPACE)
    if 0x01 <= byte <= 0x1A:
        return Key.ctrl(chr(byte + 0x60))
    if byte < 0x20:
        return Key(KeyCode.UNKNOWN)
    return Key.of(chr(byte))


def _decode_escape(buffer: bytes, pos: int) -> tuple[Key, int]:
    if pos + 1 >= len(buffer):
        return Key(KeyCode.ESCAPE), pos + 1
    follower = buffer[pos + 1]
    if follower == ord("["):
        return _decode_csi(buffer, pos + 2)
    if follower == ord("O"):
        if pos + 2 >= len(buffer):
            return Key.alt("O"), pos + 2
        code = _ARROWS.get(chr(buffer[pos + 2]), KeyCode.UNKNOWN)
        return Key(code), pos + 3
    if follower == ESC:
        return Key(KeyCode.ESCAPE), pos + 1
    if follower == BACKSPACE_BYTE:
        return Key.alt("\x7f"), pos + 2
    if 0x20 <= follower < 0x7F:
        return Key.alt(chr(follower)), pos + 2
    return Key(KeyCode.ESCAPE), pos + 1


def _decode_csi(buffer: bytes, start: int) -> tuple[Key, int]:
    pos = start
    while pos < len(buffer) and 0x30 <= buffer[pos] <= 0x3F:
        pos += 1
    if pos >= len(buffer) or not 0x40 <= buffer[pos] <= 0x7E:
        return Key(KeyCode.UNKNOWN), pos
    params = buffer[start:pos].decode("ascii").split(";")
    final = chr(buffer[pos])
    end = pos + 1
    if final == "~":
        return Key(_TILDE_CODES.get(params[0], KeyCode.UNKNOWN)), end
    if params == [""]:
        return Key(_ARROWS.get(final, KeyCode.UNKNOWN)), end
    if len(params) == 2 and params[0] == "1":
        return Key(_MODIFIED_ARROWS.get((params[1], final), KeyCode.UNKNOWN)), end
    return Key(KeyCode.UNKNOWN), end


def _utf8_width(byte: int) -> int:
    if 0xC2 <= byte <= 0xDF:
        return 2
    if 0xE0 <= byte <= 0xEF:
        return 3
    if 0xF0 <= byte <= 0xF4:
        return 4
    return 0
