from __future__ import annotations

import os

import pytest

from gorg.prompt import Key, KeyCode, KeyDecoder, read_keys


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"a", Key.of("a")),
        (b" ", Key.of(" ")),
        (b"\r", Key(KeyCode.ENTER)),
        (b"\n", Key(KeyCode.ENTER)),
        (b"\t", Key(KeyCode.TAB)),
        (b"\x7f", Key(KeyCode.BACKSPACE)),
        (b"\x03", Key.ctrl("c")),
        (b"\x04", Key.ctrl("d")),
        (b"\x08", Key.ctrl("h")),
        (b"\x17", Key.ctrl("w")),
        (b"\x1b", Key(KeyCode.ESCAPE)),
        (b"\x1b[A", Key(KeyCode.UP)),
        (b"\x1b[B", Key(KeyCode.DOWN)),
        (b"\x1b[C", Key(KeyCode.RIGHT)),
        (b"\x1b[D", Key(KeyCode.LEFT)),
        (b"\x1b[H", Key(KeyCode.HOME)),
        (b"\x1b[F", Key(KeyCode.END)),
        (b"\x1bOA", Key(KeyCode.UP)),
        (b"\x1bOH", Key(KeyCode.HOME)),
        (b"\x1b[1~", Key(KeyCode.HOME)),
        (b"\x1b[3~", Key(KeyCode.DELETE)),
        (b"\x1b[4~", Key(KeyCode.END)),
        (b"\x1b[1;5C", Key(KeyCode.CTRL_RIGHT)),
        (b"\x1b[1;5D", Key(KeyCode.CTRL_LEFT)),
        (b"\x1b[1;3C", Key(KeyCode.ALT_RIGHT)),
        (b"\x1b[1;3D", Key(KeyCode.ALT_LEFT)),
        (b"\x1bb", Key.alt("b")),
        (b"\x1bf", Key.alt("f")),
        (b"\x1b\x7f", Key.alt("\x7f")),
        (b"\x1b[15~", Key(KeyCode.UNKNOWN)),
        ("ä".encode(), Key.of("ä")),
        ("😀".encode(), Key.of("😀")),
    ],
)
def test_single_key(data: bytes, expected: Key) -> None:
    assert KeyDecoder().feed(data) == [expected]


def test_mixed_sequence_in_one_read() -> None:
    keys = KeyDecoder().feed(b"go\x1b[Bx\x7f\r")
    assert keys == [
        Key.of("g"),
        Key.of("o"),
        Key(KeyCode.DOWN),
        Key.of("x"),
        Key(KeyCode.BACKSPACE),
        Key(KeyCode.ENTER),
    ]


def test_incomplete_utf8_is_kept_until_next_feed() -> None:
    decoder = KeyDecoder()
    encoded = "ö".encode()
    assert decoder.feed(encoded[:1]) == []
    assert decoder.feed(encoded[1:] + b"a") == [Key.of("ö"), Key.of("a")]


def test_invalid_utf8_bytes_are_unknown() -> None:
    assert KeyDecoder().feed(b"\xff") == [Key(KeyCode.UNKNOWN)]
    assert KeyDecoder().feed(b"\xc3(") == [Key(KeyCode.UNKNOWN), Key.of("(")]


def test_read_keys_stops_at_end_of_input() -> None:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, b"ab\x1b[A")
        os.close(write_fd)
        write_fd = -1
        assert list(read_keys(read_fd)) == [Key.of("a"), Key.of("b"), Key(KeyCode.UP)]
    finally:
        os.close(read_fd)
        if write_fd >= 0:
            os.close(write_fd)
