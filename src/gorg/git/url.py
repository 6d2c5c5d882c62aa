"""Remote URL construction and URL-to-project-path mapping."""

from __future__ import annotations

from collections.abc import Sequence

KNOWN_SCHEMES = frozenset({"ssh", "git", "rsync", "file", "http", "https"})
DEFAULT_SSH_USER = "git"


class RemoteUrlError(ValueError):
    """Raised when a remote cannot be turned into a URL or a project path."""


def url_from_parts(parts: Sequence[str]) -> str:
    """Build a remote URL from command-line parts.

    ``["github.com", "user", "repo"]`` becomes
    ``https://github.com/user/repo.git``; ``["ssh", "github.com", "user",
    "repo"]`` becomes ``ssh://git@github.com/user/repo.git``. A single part
    is taken to be a complete URL and returned unchanged.
    """
    if not parts:
        raise RemoteUrlError("Not enough parameters to build a remote URL")
    if len(parts) == 1:
        return parts[0]

    first = parts[0]
    if first.startswith(("/", "~")):
        raise RemoteUrlError("File URLs are not supported")

    if first not in KNOWN_SCHEMES:
        prefix = first if _starts_with_scheme(first) else f"https://{first}"
        return _with_git_suffix(_join_path(prefix, parts[1:]))

    if first == "file":
        raise RemoteUrlError("File URLs are not supported")
    host = parts[1]
    if first in {"ssh", "rsync"} and "@" not in host:
        host = f"{DEFAULT_SSH_USER}@{host}"
    return _with_git_suffix(_join_path(f"{first}://{host}", parts[2:]))


def url_to_path(url: str) -> list[str]:
    """Map a remote URL to ``[host, *path]`` used as the project directory."""
    url = url.strip()
    if not url:
        raise RemoteUrlError("Empty URL cannot be converted to a path")
    left, sep, right = url.partition(":")
    if not sep:
        raise RemoteUrlError(f"Unsupported URL: {url}")

    if left == "file":
        raise RemoteUrlError(f"File URLs are unsupported: {url}")
    if left in KNOWN_SCHEMES:
        if not right.startswith("//"):
            raise RemoteUrlError(f"Invalid URL: {url}")
        authority, sep, path_part = right[2:].partition("/")
        if not sep:
            raise RemoteUrlError(f"Invalid URL: {url}")
        host = _left_of(_right_of(authority, "@"), ":")
    else:
        host = _right_of(left, "@")
        path_part = right

    path = [host]
    segments = [segment.strip() for segment in path_part.split("/")]
    for index, segment in enumerate(segments):
        segment = segment.removeprefix("~")
        if index == len(segments) - 1:
            segment = segment.removesuffix(".git")
        if segment:
            path.append(segment)

    if len(path) <= 1:
        raise RemoteUrlError("Not enough parts in URL to convert it to a path")
    return path


def _starts_with_scheme(value: str) -> bool:
    scheme, sep, _ = value.partition(":")
    return bool(sep) and scheme in KNOWN_SCHEMES


def _join_path(prefix: str, segments: Sequence[str]) -> str:
    kept = [segment for segment in segments if segment.strip()]
    return "/".join([prefix, *kept])


def _with_git_suffix(url: str) -> str:
    return url if url.endswith(".git") else f"{url}.git"


def _left_of(value: str, separator: str) -> str:
    return value.partition(separator)[0]


def _right_of(value: str, separator: str) -> str:
    head, sep, tail = value.partition(separator)
    return tail if sep else head
