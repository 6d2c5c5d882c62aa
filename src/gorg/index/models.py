"""Typed models for the repository index."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class Match:
    """Ranked index hit."""

    record: str
    score: float


class InvalidRecordError(ValueError):
    """Raised when a record cannot be stored as a single index line."""


class IndexIOError(Exception):
    """Raised when the index file cannot be read, decoded, or written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason
