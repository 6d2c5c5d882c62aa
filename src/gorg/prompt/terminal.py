"""Raw-mode terminal control and ANSI escape helpers."""

from __future__ import annotations

import os
import termios
import tty

DEFAULT_TERMINAL_SIZE = (80, 80)

CLEAR_LINE = "\x1b[2K"


class TerminalError(Exception):
    """Raised when the terminal cannot be switched into raw mode."""


class RawTerminal:
    """Holds the saved termios state of one file descriptor while raw."""

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._saved: list[object] | None = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    def acquire(self) -> None:
        """Switch to unbuffered, unechoed input."""
        if not os.isatty(self._fd):
            raise TerminalError(f"File descriptor {self._fd} is not a terminal")
        try:
            self._saved = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        except termios.error as exc:
            self._saved = None
            raise TerminalError(f"Failed to enter raw mode: {exc}") from exc

    def release(self) -> None:
        """Restore the attributes saved by acquire(); no-op when not active."""
        if self._saved is None:
            return
        saved = self._saved
        self._saved = None
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, saved)
        except termios.error as exc:
            raise TerminalError(f"Failed to restore terminal mode: {exc}") from exc


def terminal_size(fd: int) -> tuple[int, int]:
    """Return (columns, rows), falling back to a fixed default."""
    try:
        size = os.get_terminal_size(fd)
    except OSError:
        return DEFAULT_TERMINAL_SIZE
    if size.columns <= 0 or size.lines <= 0:
        return DEFAULT_TERMINAL_SIZE
    return size.columns, size.lines


def cursor_up(count: int) -> str:
    return f"\x1b[{count}A" if count > 0 else ""


def cursor_down(count: int) -> str:
    return f"\x1b[{count}B" if count > 0 else ""


def cursor_right(count: int) -> str:
    return f"\x1b[{count}C" if count > 0 else ""
