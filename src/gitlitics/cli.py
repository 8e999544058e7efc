"""CLI entrypoint for gitlitics."""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .aggregator import SORT_CHOICES
from .config import DEFAULT_CONFIG_PATH
from .errors import ConfigError, RetrievalError

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--paths",
    default=None,
    help="Repository URLs or local directories, comma-separated (overrides the config file)",
)
@click.option(
    "--conf",
    "config_path",
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to the YAML config file",
)
@click.option(
    "--user",
    "username",
    envvar="GITLAB_USER",
    default=None,
    show_envvar=True,
    help="Username for HTTP(S) clones",
)
@click.option(
    "--password",
    envvar="GITLAB_PASSWORD",
    default=None,
    show_envvar=True,
    help="Password or token for HTTP(S) clones",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--sort-by",
    type=click.Choice(SORT_CHOICES, case_sensitive=False),
    default="additions_per_day",
    show_default=True,
    help="Sort authors by this metric",
)
@click.option(
    "--top-n", default=0, show_default=True, help="Number of authors to show per table (0 = all)"
)
@click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(),
    help="Save output to file instead of stdout",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.version_option(version=__version__)
def main(
    paths: str | None,
    config_path: str,
    username: str | None,
    password: str | None,
    output_format: str,
    sort_by: str,
    top_n: int,
    output_file: str | None,
    verbose: bool,
) -> None:
    """Per-author contribution statistics across git repositories.

    \b
    For every repository: commits, added + deleted lines, active days and
    additions per day of each author, then the totals over all repositories.

    \b
    Examples:
      gitlitics --paths https://git.example.com/team/service.git
      gitlitics --conf team.yml --sort-by total --top-n 10
      gitlitics --paths ./repo-a,./repo-b --format json --output stats.json
    """
    from .logging_config import setup_logging

    setup_logging(verbose=verbose)

    from .config import load_config
    from .orchestrator import run

    try:
        config = load_config(config_path, paths=paths)
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)

    logger.debug("Loaded config: %s", config)

    try:
        run(
            config,
            output_format=output_format.lower(),
            sort_by=sort_by.lower(),
            top_n=top_n,
            output_file=output_file,
            username=username,
            password=password,
        )
    except RetrievalError as exc:
        click.echo(f"Repository error: {exc}", err=True)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
