"""Interactive prompt session: raw-mode ownership and frame rendering."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from itertools import islice
from typing import Protocol, TextIO

from gorg.prompt.editor import PromptEvent, PromptState, apply_key
from gorg.prompt.keys import Key
from gorg.prompt.terminal import (
    CLEAR_LINE,
    DEFAULT_TERMINAL_SIZE,
    TerminalError,
    cursor_down,
    cursor_right,
    cursor_up,
    terminal_size,
)

LOGGER = logging.getLogger(__name__)

PROMPT_MARKER = ">>> "
SELECTED_PREFIX = "  * "
ROW_PREFIX = "    "
MIN_ROW_WIDTH = 10


class RawModeGuard(Protocol):
    def acquire(self) -> None: ...

    def release(self) -> None: ...


class PromptSession:
    """One run of the prompt, from entering raw mode to leaving it.

    Raw mode is acquired in the constructor; if that fails nothing else is
    set up. ``close()`` (also called on context exit) erases the last frame
    and restores the terminal. Cleanup failures are logged and never mask
    the session outcome or an exception already in flight.
    """

    def __init__(
        self,
        output: TextIO,
        terminal: RawModeGuard,
        query: str = "",
        size_provider: Callable[[], tuple[int, int]] | None = None,
    ) -> None:
        self._output = output
        self._terminal = terminal
        self._size_provider = size_provider or _output_size_provider(output)
        self._state = PromptState.initial(query)
        self._closed = False
        terminal.acquire()

    def __enter__(self) -> PromptSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def state(self) -> PromptState:
        return self._state

    @property
    def text(self) -> str:
        return self._state.text

    @property
    def selected(self) -> int:
        return self._state.selected

    def handle_key(self, key: Key) -> PromptEvent | None:
        """Apply one key press and return the resulting event, if any."""
        self._state, event = apply_key(self._state, key)
        return event

    def render(self, items: Iterable[str]) -> None:
        """Redraw the prompt line and up to ``rows - 2`` ranked items."""
        columns, rows = self._size_provider()
        state = self._state
        parts = [self._erase_frame(state.lines_printed)]
        parts.append(f"{PROMPT_MARKER}{state.text}\r\n")
        lines = 1
        rendered = 0
        for index, item in enumerate(islice(items, max(rows - 2, 0))):
            prefix = SELECTED_PREFIX if index == state.selected else ROW_PREFIX
            width = max(columns, MIN_ROW_WIDTH) - len(prefix)
            parts.append(f"{prefix}{item[:width]}\r\n")
            lines += 1
            rendered += 1
        column = len(PROMPT_MARKER.encode("utf-8")) + len(
            state.text[: state.cursor].encode("utf-8")
        )
        parts.append(cursor_up(lines))
        parts.append(cursor_right(column))
        self._output.write("".join(parts))
        self._output.flush()
        self._state = replace(state, rendered_rows=rendered, lines_printed=lines)

    def close(self) -> None:
        """Erase the last frame and leave raw mode. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self._output.write(self._erase_frame(self._state.lines_printed))
            self._output.flush()
        except (OSError, ValueError) as exc:
            LOGGER.warning("Failed to clear prompt output: %s", exc)
        self._state = replace(self._state, lines_printed=0)
        try:
            self._terminal.release()
        except TerminalError as exc:
            LOGGER.warning("Failed to quit prompt UI: %s", exc)

    @staticmethod
    def _erase_frame(lines_printed: int) -> str:
        parts = [f"\r{CLEAR_LINE}"]
        for _ in range(lines_printed):
            parts.append(f"\r{CLEAR_LINE}{cursor_down(1)}")
        parts.append(cursor_up(lines_printed))
        return "".join(parts)


def _output_size_provider(output: TextIO) -> Callable[[], tuple[int, int]]:
    try:
        fd = output.fileno()
    except OSError:
        return lambda: DEFAULT_TERMINAL_SIZE
    return lambda: terminal_size(fd)
