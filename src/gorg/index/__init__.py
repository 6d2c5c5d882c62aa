"""Repository index, scoring, and discovery package."""

from .discovery import discover_repositories
from .matcher import Keywords, score
from .models import IndexIOError, InvalidRecordError, Match
from .store import IndexView, RepoIndex

__all__ = [
    "IndexIOError",
    "IndexView",
    "InvalidRecordError",
    "Keywords",
    "Match",
    "RepoIndex",
    "discover_repositories",
    "score",
]
