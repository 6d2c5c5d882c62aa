"""Git executable wrapper and remote URL helpers."""

from .command import GitCommand, GitCommandError
from .url import RemoteUrlError, url_from_parts, url_to_path

__all__ = [
    "GitCommand",
    "GitCommandError",
    "RemoteUrlError",
    "url_from_parts",
    "url_to_path",
]
