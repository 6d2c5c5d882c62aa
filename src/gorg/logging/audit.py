"""Append-only JSONL record of every gorg command run."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

# Parser plumbing, not user input.
IGNORED_ARGUMENTS = frozenset({"handler", "command_name", "config", "verbose"})


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """One finished command: outcome plus sanitized argument shape."""

    timestamp: str
    command: str
    ok: bool
    exit_code: int
    error_code: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: Mapping[str, object]) -> dict[str, object]:
    """Describe arguments without their text.

    Flags and numbers are kept. Strings become ``<key>_present`` and
    ``<key>_length``; sequences (queries, remotes, commands) become
    ``<key>_type`` and ``<key>_length``. Anything else keeps only its type.
    """
    sanitized: dict[str, object] = {}
    for key in sorted(arguments):
        value = arguments[key]
        if value is None or isinstance(value, (bool, int, float)):
            sanitized[key] = value
        elif isinstance(value, str):
            sanitized[f"{key}_present"] = bool(value)
            sanitized[f"{key}_length"] = len(value)
        elif isinstance(value, (list, tuple)):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
        else:
            sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


def build_event(
    command: str,
    exit_code: int,
    error_code: str | None,
    arguments: Mapping[str, object],
) -> AuditEvent:
    """Build the event for a finished command from its parsed arguments."""
    kept = {key: value for key, value in arguments.items() if key not in IGNORED_ARGUMENTS}
    return AuditEvent(
        timestamp=utc_timestamp(),
        command=command,
        ok=exit_code == 0,
        exit_code=exit_code,
        error_code=error_code,
        metadata=sanitize_arguments(kept),
    )


class JsonlAuditLogger:
    """Appends events to a JSONL file, creating its directory on first write."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(asdict(event), sort_keys=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")
