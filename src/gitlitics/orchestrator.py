"""Orchestrator: wires together config, repositories, aggregator, and renderer."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .aggregator import aggregate_repo_counted, build_rows, merge_totals
from .config import Config
from .git.repository import iter_commit_records, open_repository, repo_name
from .models import AuthorStat, RepoReport, RunReport
from .renderer import (
    make_console,
    render_csv,
    render_json,
    render_repo,
    render_totals,
    write_to_file,
)

logger = logging.getLogger(__name__)


def collect_repo(
    config: Config,
    location: str,
    username: str | None = None,
    password: str | None = None,
) -> tuple[RepoReport, dict[str, AuthorStat]]:
    """Clone or open one repository and aggregate its history."""
    resolver = config.identity_resolver()
    file_filter = config.file_filter()
    policy = config.commit_policy()

    with tempfile.TemporaryDirectory(prefix="gitlitics-") as workdir:
        repo = open_repository(location, Path(workdir), username=username, password=password)
        try:
            commits = iter_commit_records(repo, policy, location=location)
            stats, seen = aggregate_repo_counted(commits, resolver, file_filter, policy)
        finally:
            repo.close()

    report = RepoReport(
        name=repo_name(location),
        location=location,
        commits_seen=seen,
        commits_counted=sum(s.commit_count for s in stats.values()),
    )
    return report, stats


def run(
    config: Config,
    output_format: str = "table",
    sort_by: str = "additions_per_day",
    top_n: int = 0,
    output_file: str | None = None,
    username: str | None = None,
    password: str | None = None,
) -> RunReport:
    """Main pipeline: walk each repository in turn, merge totals, render.

    Table output prints each repository as soon as it is done; JSON and CSV
    are written only after every repository succeeded.
    """
    report = RunReport(
        sort_by=sort_by,
        identity_field=config.author.key,
        timezone=config.timezone,
    )
    console, string_io = make_console(output_file) if output_format == "table" else (None, None)
    totals: dict[str, AuthorStat] = {}

    for location in config.paths:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=Console(stderr=True),
            transient=True,
        ) as progress:
            progress.add_task(f"Analyzing {repo_name(location)}...", total=None)
            repo_report, stats = collect_repo(config, location, username=username, password=password)

        repo_report.authors = build_rows(stats, sort_by=sort_by)
        totals = merge_totals(totals, stats)
        report.repos.append(repo_report)
        logger.info(
            "%s: %d authors, %d/%d commits counted",
            repo_report.name,
            len(stats),
            repo_report.commits_counted,
            repo_report.commits_seen,
        )
        if console is not None:
            render_repo(console, repo_report, sort_by=sort_by, top_n=top_n)

    report.totals = build_rows(totals, sort_by=sort_by)

    if output_format == "json":
        render_json(report, output_file=output_file)
    elif output_format == "csv":
        render_csv(report, output_file=output_file)
    else:
        render_totals(console, report, top_n=top_n)
        if string_io is not None:
            write_to_file(string_io.getvalue(), output_file)
    return report
