"""Git repository access via GitPython."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

from git import Repo
from git.exc import GitError

from ..errors import RetrievalError
from ..models import CommitRecord, FileChange
from ..summarizer import CommitPolicy

logger = logging.getLogger(__name__)


def repo_name(location: str) -> str:
    """Display name of a repository: the last path segment without ``.git``."""
    name = location.rstrip("/\\").replace("\\", "/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name or location


def _with_credentials(url: str, username: str | None, password: str | None) -> str:
    """Embed basic-auth credentials into an http(s) URL that has none."""
    if not username and not password:
        return url
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or "@" in parts.netloc:
        return url
    userinfo = quote(username or "", safe="")
    if password:
        userinfo += ":" + quote(password, safe="")
    return urlunsplit(parts._replace(netloc=f"{userinfo}@{parts.netloc}"))


def open_repository(
    location: str,
    workdir: Path,
    username: str | None = None,
    password: str | None = None,
) -> Repo:
    """Open a local repository in place, or clone a remote one into ``workdir``.

    Remote repositories are cloned bare; only history is read.
    """
    local = Path(location).expanduser()
    try:
        if local.is_dir():
            logger.info("Opening %s", local)
            return Repo(local)

        target = workdir / repo_name(location)
        logger.info("Cloning %s", location)
        return Repo.clone_from(
            _with_credentials(location, username, password), target, bare=True
        )
    except GitError as exc:
        raise RetrievalError(f"cannot open repository: {exc}", location) from exc


def _file_changes(commit) -> tuple[FileChange, ...]:
    changes = []
    for path, counts in commit.stats.files.items():
        changes.append(
            FileChange(
                path=str(path),
                additions=int(counts.get("insertions", 0)),
                deletions=int(counts.get("deletions", 0)),
            )
        )
    return tuple(changes)


def to_commit_record(commit, with_files: bool = True) -> CommitRecord:
    """Convert a GitPython commit; per-file stats are read only when asked for."""
    return CommitRecord(
        sha=commit.hexsha,
        author_name=commit.author.name or "",
        author_email=commit.author.email or "",
        authored_at=commit.authored_datetime,
        parent_count=len(commit.parents),
        files=_file_changes(commit) if with_files else (),
    )


def iter_commit_records(
    repo: Repo, policy: CommitPolicy, location: str | None = None
) -> Iterator[CommitRecord]:
    """Yield every commit reachable from any ref.

    Commits the policy will not count are yielded without file stats, so
    excluded merges are never diffed. Any git failure, including one while
    diffing a single commit, raises RetrievalError.
    """
    location = location or str(repo.git_dir)
    try:
        for commit in repo.iter_commits("--all"):
            with_files = policy.counts_parents(len(commit.parents))
            yield to_commit_record(commit, with_files=with_files)
    except GitError as exc:
        raise RetrievalError(f"cannot read commit history: {exc}", location) from exc
