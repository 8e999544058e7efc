"""Rich-based terminal report renderer with JSON/CSV support."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict

from rich.console import Console
from rich.table import Table

from .models import AuthorRow, RepoReport, RunReport

_SORT_LABELS = {
    "commits": "Commits",
    "total": "Total",
    "additions": "Additions",
    "deletions": "Deletions",
    "days": "Days",
    "additions_per_day": "Additions/Day",
}

_COLUMNS = ["Commits", "Total", "Additions", "Deletions", "Days", "Additions/Day"]

TOTALS_TITLE = "All repositories"


def _format_number(n: int) -> str:
    return f"{n:,}"


def write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console(stderr=True).print(f"Saved to {output_file}")


def make_console(output_file: str | None = None) -> tuple[Console, io.StringIO | None]:
    if output_file:
        string_io = io.StringIO()
        return Console(file=string_io, force_terminal=False, width=120), string_io
    return Console(), None


def author_table(
    title: str,
    rows: list[AuthorRow],
    sort_by: str = "additions_per_day",
    top_n: int = 0,
) -> Table:
    """Build one author table; ``top_n`` of 0 shows every row."""
    table = Table(title=title, title_justify="left", title_style="bold green", header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Author", style="yellow")

    sort_label = _SORT_LABELS.get(sort_by, "Additions/Day")
    for col in _COLUMNS:
        label = f"{col} ▼" if col == sort_label else col
        table.add_column(label, justify="right")

    shown = rows[:top_n] if top_n > 0 else rows
    for i, r in enumerate(shown, 1):
        table.add_row(
            str(i),
            r.author,
            _format_number(r.commits),
            _format_number(r.total),
            _format_number(r.additions),
            _format_number(r.deletions),
            _format_number(r.days),
            _format_number(r.additions_per_day),
        )
    return table


def render_repo(
    console: Console,
    repo: RepoReport,
    sort_by: str = "additions_per_day",
    top_n: int = 0,
) -> None:
    """Print one repository's table as soon as it is aggregated."""
    if not repo.authors:
        console.print(f"[bold green]{repo.name}:[/bold green] [dim]no counted commits[/dim]")
        console.print()
        return
    console.print(author_table(f"{repo.name}:", repo.authors, sort_by=sort_by, top_n=top_n))
    console.print(
        f"  [dim]{_format_number(repo.commits_counted)} of "
        f"{_format_number(repo.commits_seen)} commits counted[/dim]"
    )
    console.print()


def render_totals(
    console: Console,
    report: RunReport,
    top_n: int = 0,
) -> None:
    if not report.totals:
        console.print(f"[bold green]{TOTALS_TITLE}:[/bold green] [dim]no counted commits[/dim]")
        return
    console.print(author_table(f"{TOTALS_TITLE}:", report.totals, sort_by=report.sort_by, top_n=top_n))
    console.print()


def render_json(report: RunReport, output_file: str | None = None) -> None:
    """Render a RunReport as JSON."""
    content = json.dumps(asdict(report), indent=2, ensure_ascii=False)
    if output_file:
        write_to_file(content, output_file)
    else:
        print(content)


def render_csv(report: RunReport, output_file: str | None = None) -> None:
    """Render author rows as CSV, one block per repository plus ``*total*`` rows."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(
        ["repository", "author", "commits", "total", "additions", "deletions", "days", "additions_per_day"]
    )

    def write_rows(repository: str, rows: list[AuthorRow]) -> None:
        for r in rows:
            writer.writerow(
                [repository, r.author, r.commits, r.total, r.additions, r.deletions, r.days, r.additions_per_day]
            )

    for repo in report.repos:
        write_rows(repo.name, repo.authors)
    write_rows("*total*", report.totals)

    content = output.getvalue()
    if output_file:
        write_to_file(content, output_file)
    else:
        print(content, end="")
