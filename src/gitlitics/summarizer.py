"""Commit classification, line-change summing and active-day truncation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timezone
from typing import Callable, NamedTuple

from .errors import ConfigError
from .models import CommitRecord

TIMEZONES = ("utc", "local")


@dataclass(frozen=True)
class CommitPolicy:
    """Which commits count, and how their timestamps become calendar days.

    With ``exclude_merges`` only commits with exactly one parent count, so
    merges and root commits are skipped. ``timezone="utc"`` converts author
    timestamps to UTC before taking the date; ``"local"`` keeps the offset
    the author recorded.
    """

    exclude_merges: bool = True
    timezone: str = "utc"

    def __post_init__(self) -> None:
        if self.timezone not in TIMEZONES:
            raise ConfigError(
                f"timezone must be one of {', '.join(TIMEZONES)}, got {self.timezone!r}"
            )

    def counts(self, commit: CommitRecord) -> bool:
        return self.counts_parents(commit.parent_count)

    def counts_parents(self, parent_count: int) -> bool:
        if self.exclude_merges:
            return parent_count == 1
        return True


class CommitSummary(NamedTuple):
    additions: int
    deletions: int
    counted: bool


def summarize(
    commit: CommitRecord,
    file_filter: Callable[[str], bool],
    policy: CommitPolicy,
) -> CommitSummary:
    """Sum the filtered additions/deletions of a commit the policy counts."""
    if not policy.counts(commit):
        return CommitSummary(0, 0, False)

    additions = 0
    deletions = 0
    for change in commit.files:
        if not file_filter(change.path):
            continue
        additions += change.additions
        deletions += change.deletions
    return CommitSummary(additions, deletions, True)


def commit_day(commit: CommitRecord, policy: CommitPolicy) -> date:
    when = commit.authored_at
    if policy.timezone == "utc" and when.tzinfo is not None:
        when = when.astimezone(timezone.utc)
    return when.date()
