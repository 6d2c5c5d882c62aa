"""Terminal prompt: key decoding, line editing, and rendering."""

from .editor import (
    QUERY_MAX_CHARS,
    Amount,
    Direction,
    PromptEvent,
    PromptState,
    apply_key,
    move_cursor,
)
from .keys import Key, KeyCode, KeyDecoder, read_keys
from .session import PROMPT_MARKER, PromptSession
from .terminal import RawTerminal, TerminalError, terminal_size

__all__ = [
    "Amount",
    "Direction",
    "Key",
    "KeyCode",
    "KeyDecoder",
    "PROMPT_MARKER",
    "PromptEvent",
    "PromptSession",
    "PromptState",
    "QUERY_MAX_CHARS",
    "RawTerminal",
    "TerminalError",
    "apply_key",
    "move_cursor",
    "read_keys",
    "terminal_size",
]
