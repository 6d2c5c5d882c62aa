"""Boundary classification shared by the matcher and the line editor."""

from __future__ import annotations

import re

_BOUNDARY_PATTERN = re.compile(r"[\s!-/:-@\[-`{-~]+")


def is_boundary(char: str) -> bool:
    """Return True for whitespace and ASCII punctuation characters."""
    if char.isspace():
        return True
    code = ord(char)
    return (
        0x21 <= code <= 0x2F
        or 0x3A <= code <= 0x40
        or 0x5B <= code <= 0x60
        or 0x7B <= code <= 0x7E
    )


def split_tokens(text: str) -> list[str]:
    """Split text into non-empty runs of non-boundary characters."""
    return [token for token in _BOUNDARY_PATTERN.split(text) if token]
