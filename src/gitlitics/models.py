"""Data models for gitlitics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class FileChange:
    path: str
    additions: int
    deletions: int


@dataclass(frozen=True)
class CommitRecord:
    """One commit as read from the repository, with its per-file diff stats."""

    sha: str
    author_name: str
    author_email: str
    authored_at: datetime
    parent_count: int
    files: tuple[FileChange, ...] = ()


@dataclass(frozen=True)
class AuthorStat:
    """Contribution totals of one author, per repository or across all of them.

    Built once from a finished commit stream (or by merging two stats) and
    never mutated afterwards.
    """

    author_key: str
    additions: int = 0
    deletions: int = 0
    commits: tuple[CommitRecord, ...] = ()
    active_days: frozenset[date] = frozenset()

    @classmethod
    def empty(cls, author_key: str) -> AuthorStat:
        return cls(author_key=author_key)

    @property
    def total(self) -> int:
        return self.additions + self.deletions

    @property
    def commit_count(self) -> int:
        return len(self.commits)

    @property
    def day_count(self) -> int:
        return len(self.active_days)

    @property
    def additions_per_day(self) -> int:
        """Additions divided by active days; 0 for an author without active days."""
        if not self.active_days:
            return 0
        return self.additions // len(self.active_days)


@dataclass
class AuthorRow:
    author: str
    commits: int
    total: int
    additions: int
    deletions: int
    days: int
    additions_per_day: int

    @classmethod
    def from_stat(cls, stat: AuthorStat) -> AuthorRow:
        return cls(
            author=stat.author_key,
            commits=stat.commit_count,
            total=stat.total,
            additions=stat.additions,
            deletions=stat.deletions,
            days=stat.day_count,
            additions_per_day=stat.additions_per_day,
        )


@dataclass
class RepoReport:
    name: str
    location: str
    commits_seen: int = 0
    commits_counted: int = 0
    authors: list[AuthorRow] = field(default_factory=list)


@dataclass
class RunReport:
    sort_by: str
    identity_field: str
    timezone: str
    repos: list[RepoReport] = field(default_factory=list)
    totals: list[AuthorRow] = field(default_factory=list)
