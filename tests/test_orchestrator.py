"""Tests for the orchestrator."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from gitlitics.config import AuthorConfig, Config
from gitlitics.errors import RetrievalError
from gitlitics.models import CommitRecord, FileChange
from gitlitics.orchestrator import collect_repo, run


def _commit(sha, name, day, parents=1, files=(("main.go", 10, 2),)):
    return CommitRecord(
        sha=sha,
        author_name=name,
        author_email=f"{name.lower()}@x.com",
        authored_at=datetime(2024, 6, day, 9, 0, tzinfo=timezone.utc),
        parent_count=parents,
        files=tuple(FileChange(*f) for f in files),
    )


HISTORIES = {
    "https://host/a.git": [
        _commit("a1", "alice", 1),
        _commit("a2", "alice", 2, files=[("x.go", 30, 0)]),
        _commit("a3", "bob", 2),
        _commit("am", "alice", 3, parents=2, files=[("x.go", 999, 999)]),
    ],
    "https://host/b.git": [
        _commit("b1", "alice", 2, files=[("y.go", 5, 5)]),
        _commit("b2", "carol", 4),
    ],
}


@pytest.fixture
def fake_git():
    def fake_open(location, workdir, username=None, password=None):
        repo = MagicMock()
        repo.location = location
        return repo

    def fake_iter(repo, policy, location=None):
        return iter(HISTORIES[repo.location])

    with patch("gitlitics.orchestrator.open_repository", side_effect=fake_open) as open_mock, patch(
        "gitlitics.orchestrator.iter_commit_records", side_effect=fake_iter
    ):
        yield open_mock


def _config(**kwargs) -> Config:
    defaults = dict(paths=list(HISTORIES))
    defaults.update(kwargs)
    return Config(**defaults)


def test_collect_repo(fake_git):
    report, stats = collect_repo(_config(), "https://host/a.git")
    assert report.name == "a"
    assert report.commits_seen == 4
    assert report.commits_counted == 3
    assert stats["alice"].additions == 40
    assert stats["alice"].deletions == 2
    assert stats["alice"].day_count == 2


def test_run_builds_repo_and_total_rows(fake_git, capsys):
    report = run(_config(), output_format="table")

    assert [r.name for r in report.repos] == ["a", "b"]
    totals = {row.author: row for row in report.totals}
    assert totals["alice"].additions == 45
    assert totals["alice"].deletions == 7
    assert totals["alice"].commits == 3
    # June 1 and 2 in repo a, June 2 again in repo b.
    assert totals["alice"].days == 2
    assert totals["carol"].commits == 1
    # 10/1 for bob and carol; alice 45//2 = 22.
    assert [row.author for row in report.totals] == ["alice", "bob", "carol"]

    out = capsys.readouterr().out
    assert "a:" in out
    assert "b:" in out
    assert "All repositories:" in out


def test_run_passes_credentials(fake_git):
    run(_config(paths=["https://host/a.git"]), output_format="json", username="u", password="p")
    kwargs = fake_git.call_args.kwargs
    assert kwargs["username"] == "u"
    assert kwargs["password"] == "p"


def test_run_json_output(fake_git, capsys):
    run(_config(author=AuthorConfig(key="mail")), output_format="json", sort_by="total")
    data = json.loads(capsys.readouterr().out)
    assert data["identity_field"] == "mail"
    assert data["sort_by"] == "total"
    assert data["totals"][0]["author"] == "alice@x.com"


def test_run_table_to_file(fake_git, tmp_path, capsys):
    out = tmp_path / "report.txt"
    run(_config(), output_format="table", output_file=str(out))
    assert "All repositories:" in out.read_text(encoding="utf-8")
    assert "All repositories:" not in capsys.readouterr().out


def test_run_stops_on_retrieval_error(capsys):
    def fake_open(location, workdir, username=None, password=None):
        if location.endswith("b.git"):
            raise RetrievalError("cannot open repository", location)
        repo = MagicMock()
        repo.location = location
        return repo

    with patch("gitlitics.orchestrator.open_repository", side_effect=fake_open), patch(
        "gitlitics.orchestrator.iter_commit_records",
        side_effect=lambda repo, policy, location=None: iter(HISTORIES[repo.location]),
    ):
        with pytest.raises(RetrievalError):
            run(_config(), output_format="json")

    # JSON output is all-or-nothing.
    assert capsys.readouterr().out == ""
