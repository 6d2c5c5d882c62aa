"""Pure prompt state transitions: line editing and list navigation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from gorg.prompt.keys import Key, KeyCode
from gorg.text import is_boundary

QUERY_MAX_CHARS = 1000


class PromptEvent(Enum):
    """Session-level outcome of handling one key."""

    EXIT = "exit"
    PROMPT_UPDATED = "prompt_updated"
    CURSOR_UPDATED = "cursor_updated"
    SELECTION_UPDATED = "selection_updated"
    SELECTION_DONE = "selection_done"


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"


class Amount(Enum):
    CHAR = "char"
    WORD = "word"
    END = "end"


@dataclass(slots=True, frozen=True)
class PromptState:
    """Query text, cursor, selection, and last-frame counters."""

    text: str = ""
    cursor: int = 0
    selected: int = 0
    rendered_rows: int = 0
    lines_printed: int = 0

    @classmethod
    def initial(cls, query: str) -> PromptState:
        text = query[:QUERY_MAX_CHARS]
        return cls(text=text, cursor=len(text))


_CANCEL_KEYS = frozenset({Key.ctrl("c"), Key.ctrl("d")})
_DELETE_WORD_KEYS = frozenset({Key.ctrl("h"), Key.alt("\x7f"), Key.ctrl("w")})
_SELECT_UP_KEYS = frozenset({Key(KeyCode.UP), Key.ctrl("p")})
_SELECT_DOWN_KEYS = frozenset({Key(KeyCode.DOWN), Key.ctrl("n")})
_CURSOR_MOVES: dict[Key, tuple[Direction, Amount]] = {
    Key(KeyCode.LEFT): (Direction.LEFT, Amount.CHAR),
    Key.ctrl("b"): (Direction.LEFT, Amount.CHAR),
    Key(KeyCode.RIGHT): (Direction.RIGHT, Amount.CHAR),
    Key.ctrl("f"): (Direction.RIGHT, Amount.CHAR),
    Key(KeyCode.CTRL_LEFT): (Direction.LEFT, Amount.WORD),
    Key(KeyCode.ALT_LEFT): (Direction.LEFT, Amount.WORD),
    Key.alt("b"): (Direction.LEFT, Amount.WORD),
    Key(KeyCode.CTRL_RIGHT): (Direction.RIGHT, Amount.WORD),
    Key(KeyCode.ALT_RIGHT): (Direction.RIGHT, Amount.WORD),
    Key.alt("f"): (Direction.RIGHT, Amount.WORD),
    Key(KeyCode.HOME): (Direction.LEFT, Amount.END),
    Key.ctrl("a"): (Direction.LEFT, Amount.END),
    Key(KeyCode.END): (Direction.RIGHT, Amount.END),
    Key.ctrl("e"): (Direction.RIGHT, Amount.END),
}


def apply_key(state: PromptState, key: Key) -> tuple[PromptState, PromptEvent | None]:
    """Return the next state and the event to emit, if any."""
    if key.code is KeyCode.ENTER:
        return state, PromptEvent.SELECTION_DONE
    if key in _CANCEL_KEYS:
        return state, PromptEvent.EXIT
    if key.code is KeyCode.BACKSPACE:
        return _delete_char(state)
    if key in _DELETE_WORD_KEYS:
        return _delete_word(state)
    if key in _SELECT_UP_KEYS:
        if state.selected > 0:
            return replace(state, selected=state.selected - 1), PromptEvent.SELECTION_UPDATED
        return state, None
    if key in _SELECT_DOWN_KEYS:
        if state.selected + 1 < state.rendered_rows:
            return replace(state, selected=state.selected + 1), PromptEvent.SELECTION_UPDATED
        return state, None
    movement = _CURSOR_MOVES.get(key)
    if movement is not None:
        cursor = move_cursor(state.text, state.cursor, *movement)
        if cursor == state.cursor:
            return state, None
        return replace(state, cursor=cursor), PromptEvent.CURSOR_UPDATED
    if key.code is KeyCode.CHAR and key.char.isprintable():
        return _insert_char(state, key.char)
    return state, None


def move_cursor(text: str, cursor: int, direction: Direction, amount: Amount) -> int:
    """Compute a new cursor position within ``text``."""
    if not text:
        return 0
    if amount is Amount.END:
        return 0 if direction is Direction.LEFT else len(text)
    if amount is Amount.CHAR:
        if direction is Direction.LEFT:
            return max(cursor - 1, 0)
        return min(cursor + 1, len(text))
    if direction is Direction.LEFT:
        return _word_left(text, cursor)
    return _word_right(text, cursor)


def _word_left(text: str, cursor: int) -> int:
    if cursor <= 0:
        return cursor
    pos = cursor - 1
    if is_boundary(text[pos]):
        while pos > 0 and is_boundary(text[pos - 1]):
            pos -= 1
    while pos > 0 and not is_boundary(text[pos - 1]):
        pos -= 1
    return pos


def _word_right(text: str, cursor: int) -> int:
    end = len(text)
    if cursor >= end:
        return cursor
    pos = cursor + 1
    if is_boundary(text[cursor]):
        while pos < end and is_boundary(text[pos]):
            pos += 1
    while pos < end and not is_boundary(text[pos]):
        pos += 1
    return pos


def _insert_char(state: PromptState, char: str) -> tuple[PromptState, PromptEvent | None]:
    if len(state.text) + 1 > QUERY_MAX_CHARS:
        return state, None
    text = state.text[: state.cursor] + char + state.text[state.cursor :]
    return replace(state, text=text, cursor=state.cursor + 1, selected=0), (
        PromptEvent.PROMPT_UPDATED
    )


def _delete_char(state: PromptState) -> tuple[PromptState, PromptEvent | None]:
    if state.cursor == 0:
        return state, None
    text = state.text[: state.cursor - 1] + state.text[state.cursor :]
    return replace(state, text=text, cursor=state.cursor - 1, selected=0), (
        PromptEvent.PROMPT_UPDATED
    )


def _delete_word(state: PromptState) -> tuple[PromptState, PromptEvent | None]:
    start = move_cursor(state.text, state.cursor, Direction.LEFT, Amount.WORD)
    if start == state.cursor:
        return state, None
    text = state.text[:start] + state.text[state.cursor :]
    return replace(state, text=text, cursor=start, selected=0), PromptEvent.PROMPT_UPDATED
