"""Data models for commit collection."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Mapping

from ..exceptions import UpstreamError


@dataclass(frozen=True)
class CommitRecord:
    author: str
    committed_at: dt.datetime  # timezone-aware, in the committer's offset
    additions: int = 0
    deletions: int = 0

    @property
    def edits(self) -> int:
        return self.additions + self.deletions

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> CommitRecord:
        """Build a record from a GitLab ``repository/commits`` entry.

        A missing ``stats`` object counts as zero additions and deletions.
        """
        try:
            author = str(payload["author_name"])
            committed_at = dt.datetime.fromisoformat(str(payload["committed_date"]))
        except (KeyError, ValueError) as e:
            raise UpstreamError(f"malformed commit payload: {e}")

        stats = payload.get("stats") or {}
        try:
            additions = int(stats.get("additions") or 0)
            deletions = int(stats.get("deletions") or 0)
        except (AttributeError, TypeError, ValueError) as e:
            raise UpstreamError(f"malformed commit stats: {e}")
        return cls(author=author, committed_at=committed_at, additions=additions, deletions=deletions)


@dataclass(frozen=True)
class ProjectLocator:
    """Where a repository lives: GitLab base URL and ``namespace/name`` path."""

    gitlab_url: str
    path: str

    @property
    def repo_name(self) -> str:
        return self.path.rsplit("/", 1)[-1]
