"""Thin subprocess wrapper around the git executable."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class GitCommandError(Exception):
    """Raised when a git invocation exits with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str) -> None:
        detail = stderr.strip() or "git command failed"
        super().__init__(f"{' '.join(args)} exited with status {returncode}: {detail}")
        self.args_list = tuple(args)
        self.returncode = returncode
        self.stderr = stderr


class GitCommand:
    """Runs git sub-commands with a configurable executable."""

    def __init__(self, executable: str = "git") -> None:
        self._executable = executable

    def init(self, directory: Path) -> None:
        self._run(["init"], cwd=directory)

    def clone(self, url: str, directory: Path) -> None:
        self._run(["clone", "--", url, str(directory)], capture=False)

    def remote_list(self, directory: Path) -> list[str]:
        output = self._run(["remote"], cwd=directory)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def remote_add(self, name: str, url: str, directory: Path) -> None:
        self._run(["remote", "add", name, url], cwd=directory)

    def remote_set_url(self, name: str, url: str, directory: Path) -> None:
        self._run(["remote", "set-url", name, url], cwd=directory)

    def _run(self, args: list[str], cwd: Path | None = None, capture: bool = True) -> str:
        command = [self._executable, *args]
        LOGGER.debug("Running %s (cwd=%s)", " ".join(command), cwd)
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                check=False,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError as exc:
            raise GitCommandError(command, 127, f"not found: {exc.filename}") from exc
        if completed.returncode != 0:
            raise GitCommandError(command, completed.returncode, completed.stderr or "")
        return completed.stdout or ""
