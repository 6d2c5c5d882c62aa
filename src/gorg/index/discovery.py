"""Filesystem walk that finds Git working copies under the projects root."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

LOGGER = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"


def discover_repositories(projects_root: Path) -> Iterator[str]:
    """Yield repository paths relative to the root, depth-first in name order.

    A directory holding a ``.git`` directory is reported and not descended
    into. The root itself is never reported.
    """
    root = projects_root.resolve()
    stack: list[Path] = []
    stack.extend(reversed(_child_dirs(root)))
    while stack:
        current = stack.pop()
        relative = current.relative_to(root).as_posix()
        if not _is_text(relative):
            LOGGER.warning("Skipping directory with a non-UTF-8 name: %r", relative)
            continue
        children = _child_dirs(current)
        if any(child.name == GIT_DIR_NAME for child in children):
            yield relative
            continue
        stack.extend(reversed(children))


def _child_dirs(directory: Path) -> list[Path]:
    try:
        with os.scandir(directory) as entries:
            ordered_entries = sorted(entries, key=lambda item: item.name)
    except OSError as exc:
        LOGGER.warning("Failed to read directory %s: %s", directory, exc.strerror)
        return []
    output: list[Path] = []
    for entry in ordered_entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                output.append(Path(entry.path))
        except OSError:
            continue
    return output


def _is_text(name: str) -> bool:
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
