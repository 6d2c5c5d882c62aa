"""Sorted newline-delimited index of repository paths."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from gorg.index.matcher import Keywords
from gorg.index.models import IndexIOError, InvalidRecordError, Match

LOGGER = logging.getLogger(__name__)


class RepoIndex:
    """Owns one sorted, deduplicated, newline-joined record buffer."""

    def __init__(self, data: str = "") -> None:
        self._data = data

    @property
    def data(self) -> str:
        """Return the raw buffer exactly as it would be saved."""
        return self._data

    @classmethod
    def empty(cls) -> RepoIndex:
        return cls()

    @classmethod
    def load(cls, path: Path) -> RepoIndex | None:
        """Load an index file; return None when the file does not exist."""
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise IndexIOError(path=path, reason=f"Failed to read index ({exc.strerror})") from exc
        try:
            data = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise IndexIOError(path=path, reason="Index file is not valid UTF-8") from exc
        LOGGER.debug("Loaded index from %s (%d bytes)", path, len(raw))
        return cls(data)

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> RepoIndex:
        """Build a fresh index from arbitrary entries (trimmed, deduplicated, sorted)."""
        records = {entry.strip() for entry in entries}
        records.discard("")
        for record in records:
            if "\n" in record:
                raise InvalidRecordError(f"Cannot store records containing new lines: {record!r}")
        ordered = sorted(records)
        if not ordered:
            return cls()
        return cls("\n".join(ordered) + "\n")

    def save(self, path: Path) -> None:
        """Overwrite the index file with the buffer verbatim."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(self._data)
        except OSError as exc:
            raise IndexIOError(path=path, reason=f"Failed to write index ({exc.strerror})") from exc
        LOGGER.debug("Saved index to %s", path)

    def add(self, record: str) -> bool:
        """Insert a record in sorted position; return False when already present.

        Blank input is not a record and is ignored the same way.
        """
        entry = record.strip()
        if not entry:
            return False
        if "\n" in entry:
            raise InvalidRecordError(f"Cannot store records containing new lines: {entry!r}")

        offset = 0
        for line in self._data.split("\n"):
            if line == entry:
                return False
            if line > entry:
                break
            offset += len(line) + 1

        if offset < len(self._data):
            self._data = f"{self._data[:offset]}{entry}\n{self._data[offset:]}"
        elif self._data and not self._data.endswith("\n"):
            self._data = f"{self._data}\n{entry}"
        else:
            self._data = f"{self._data}{entry}"
        return True

    def records(self) -> Iterator[str]:
        """Yield every non-empty trimmed line in buffer order."""
        for line in self._data.split("\n"):
            stripped = line.strip()
            if stripped:
                yield stripped

    def find_matches(self, query: str) -> Iterator[str]:
        """Yield matching records in buffer order, unranked."""
        keywords = Keywords.parse(query)
        if keywords.is_empty():
            yield from self.records()
            return
        for record in self.records():
            if keywords.score(record) != 0.0:
                yield record

    def find_by_prefix(self, prefix: str) -> Iterator[str]:
        """Yield records starting with the trimmed prefix."""
        normalized = prefix.strip()
        for record in self.records():
            if record.startswith(normalized):
                yield record

    def view(self) -> IndexView:
        return IndexView(self._data)


class IndexView:
    """Pre-split, read-only snapshot used for repeated ranked queries."""

    def __init__(self, data: str) -> None:
        self._lines = tuple(line.strip() for line in data.split("\n"))

    def __len__(self) -> int:
        return len(self._lines)

    def find_matches(self, query: str, out: list[Match], limit: int | None = None) -> None:
        """Fill ``out`` with scored matches, best first.

        ``out`` is cleared first so one list can be reused per keystroke.
        Equal scores keep index order, which is ascending record order.
        """
        out.clear()
        keywords = Keywords.parse(query)
        for line in self._lines:
            line_score = keywords.score(line)
            if line_score != 0.0:
                out.append(Match(record=line, score=line_score))
        out.sort(key=lambda match: -match.score)
        if limit is not None and len(out) > limit:
            del out[limit:]
