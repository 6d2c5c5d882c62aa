from __future__ import annotations

import io

from gorg.prompt import Key, KeyCode, PromptSession

ERASE = "\r\x1b[2K"


class FakeTerminal:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def acquire(self) -> None:
        self.calls.append("acquire")

    def release(self) -> None:
        self.calls.append("release")


def _session(
    query: str = "", size: tuple[int, int] = (80, 24)
) -> tuple[PromptSession, io.StringIO]:
    output = io.StringIO()
    session = PromptSession(
        output=output, terminal=FakeTerminal(), query=query, size_provider=lambda: size
    )
    return session, output


def _take(output: io.StringIO) -> str:
    value = output.getvalue()
    output.seek(0)
    output.truncate()
    return value


def test_first_frame_layout() -> None:
    session, output = _session(query="go", size=(80, 5))
    session.render(["a", "b", "c", "d"])
    assert _take(output) == (
        ERASE
        + ">>> go\r\n"
        + "  * a\r\n"
        + "    b\r\n"
        + "    c\r\n"
        + "\x1b[4A"
        + "\x1b[6C"
    )
    assert session.state.rendered_rows == 3
    assert session.state.lines_printed == 4


def test_next_frame_erases_previous_lines() -> None:
    session, output = _session(query="", size=(80, 24))
    session.render(["a", "b"])
    _take(output)
    session.render(["a"])
    frame = _take(output)
    expected_erase = ERASE + (ERASE + "\x1b[1B") * 3 + "\x1b[3A"
    assert frame.startswith(expected_erase)
    assert frame[len(expected_erase) :] == ">>> \r\n  * a\r\n\x1b[2A\x1b[4C"


def test_cursor_column_counts_utf8_bytes() -> None:
    session, output = _session(query="äb")
    session.handle_key(Key(KeyCode.LEFT))
    session.render([])
    # marker is 4 bytes, "ä" is 2
    assert _take(output).endswith("\x1b[1A\x1b[6C")


def test_rows_are_truncated_to_terminal_width() -> None:
    session, output = _session(size=(12, 24))
    session.render(["abcdefghijkl", "xy"])
    frame = _take(output)
    assert "  * abcdefgh\r\n" in frame
    assert "    xy\r\n" in frame


def test_narrow_terminal_uses_minimum_width() -> None:
    session, output = _session(size=(3, 24))
    session.render(["abcdefghijkl"])
    assert "  * abcdef\r\n" in _take(output)


def test_truncation_never_splits_characters() -> None:
    session, output = _session(size=(12, 24))
    session.render(["ä" * 10])
    assert "  * " + "ä" * 8 + "\r\n" in _take(output)


def test_selected_row_is_marked() -> None:
    session, output = _session()
    session.render(["a", "b", "c"])
    session.handle_key(Key(KeyCode.DOWN))
    _take(output)
    session.render(["a", "b", "c"])
    frame = _take(output)
    assert "    a\r\n  * b\r\n    c\r\n" in frame


def test_tiny_terminal_renders_only_the_prompt() -> None:
    session, output = _session(size=(80, 2))
    session.render(["a", "b"])
    assert "  * a" not in _take(output)
    assert session.state.rendered_rows == 0
    assert session.state.lines_printed == 1


def test_close_erases_last_frame() -> None:
    session, output = _session()
    session.render(["a"])
    _take(output)
    session.close()
    assert _take(output) == ERASE + (ERASE + "\x1b[1B") * 2 + "\x1b[2A"
    assert session.state.lines_printed == 0
