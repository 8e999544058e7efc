"""Data aggregation: per-repository author stats and cross-repository totals."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Callable

from .identity import IdentityResolver
from .models import AuthorRow, AuthorStat, CommitRecord
from .summarizer import CommitPolicy, commit_day, summarize

logger = logging.getLogger(__name__)

SORT_CHOICES = ("additions_per_day", "total", "additions", "deletions", "commits", "days")


def _sort_key(sort_by: str):
    """Return a sort key function for AuthorRow."""
    if sort_by == "total":
        return lambda r: r.total
    elif sort_by == "additions":
        return lambda r: r.additions
    elif sort_by == "deletions":
        return lambda r: r.deletions
    elif sort_by == "commits":
        return lambda r: r.commits
    elif sort_by == "days":
        return lambda r: r.days
    else:  # additions_per_day
        return lambda r: r.additions_per_day


class _Bucket:
    """Running totals for one author while a repository is being walked."""

    __slots__ = ("additions", "deletions", "commits", "days")

    def __init__(self) -> None:
        self.additions = 0
        self.deletions = 0
        self.commits: list[CommitRecord] = []
        self.days: set[date] = set()

    def freeze(self, author_key: str) -> AuthorStat:
        return AuthorStat(
            author_key=author_key,
            additions=self.additions,
            deletions=self.deletions,
            commits=tuple(self.commits),
            active_days=frozenset(self.days),
        )


def aggregate_repo_counted(
    commits: Iterable[CommitRecord],
    resolver: IdentityResolver,
    file_filter: Callable[[str], bool],
    policy: CommitPolicy,
) -> tuple[dict[str, AuthorStat], int]:
    """Group one repository's commits by author and build an AuthorStat each.

    The stream is consumed once, in the order given. Commits the policy
    rejects are dropped before an author bucket is created, so every returned
    author has at least one commit. Also returns how many commits the stream
    yielded, counted or not.
    """
    buckets: dict[str, _Bucket] = {}
    seen = 0
    for commit in commits:
        seen += 1
        summary = summarize(commit, file_filter, policy)
        if not summary.counted:
            continue
        key = resolver.resolve(commit.author_name, commit.author_email)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _Bucket()
        bucket.additions += summary.additions
        bucket.deletions += summary.deletions
        bucket.commits.append(commit)
        bucket.days.add(commit_day(commit, policy))

    counted = sum(len(b.commits) for b in buckets.values())
    logger.debug(
        "Aggregated %d commits (%d counted) into %d authors", seen, counted, len(buckets)
    )
    return {key: bucket.freeze(key) for key, bucket in buckets.items()}, seen


def aggregate_repo(
    commits: Iterable[CommitRecord],
    resolver: IdentityResolver,
    file_filter: Callable[[str], bool],
    policy: CommitPolicy,
) -> dict[str, AuthorStat]:
    """Per-author stats of one repository; see :func:`aggregate_repo_counted`."""
    stats, _ = aggregate_repo_counted(commits, resolver, file_filter, policy)
    return stats


def merge_stats(a: AuthorStat, b: AuthorStat) -> AuthorStat:
    """Combine two stats of the same author; ``a``'s commits come first.

    Commits are concatenated without de-duplication: a commit present in two
    repositories (e.g. forks) is counted twice.
    """
    return AuthorStat(
        author_key=a.author_key,
        additions=a.additions + b.additions,
        deletions=a.deletions + b.deletions,
        commits=a.commits + b.commits,
        active_days=a.active_days | b.active_days,
    )


def merge_totals(
    accumulated: Mapping[str, AuthorStat],
    incoming: Mapping[str, AuthorStat],
) -> dict[str, AuthorStat]:
    """Fold one repository's stats into the running totals, returning a new mapping."""
    merged = dict(accumulated)
    for key, stat in incoming.items():
        merged[key] = merge_stats(merged.get(key, AuthorStat.empty(key)), stat)
    return merged


def build_rows(
    stats: Mapping[str, AuthorStat],
    sort_by: str = "additions_per_day",
) -> list[AuthorRow]:
    """Turn stats into report rows sorted descending by ``sort_by``.

    Ties fall back to total descending, then author key ascending, so the
    order does not depend on mapping iteration order.
    """
    rows = [AuthorRow.from_stat(stat) for stat in stats.values()]
    rows.sort(key=lambda r: r.author)
    rows.sort(key=lambda r: r.total, reverse=True)
    rows.sort(key=_sort_key(sort_by), reverse=True)
    return rows
