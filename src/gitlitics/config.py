"""YAML configuration: loading, defaults and validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .filters import FileFilter
from .identity import IDENTITY_FIELDS, IdentityResolver
from .summarizer import TIMEZONES, CommitPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "gitlitics.yml"


@dataclass(frozen=True)
class AuthorConfig:
    key: str = "name"
    duplicates: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class FilesConfig:
    include: str | None = None
    exclude: str | None = None


@dataclass(frozen=True)
class Config:
    paths: list[str] = field(default_factory=list)
    author: AuthorConfig = field(default_factory=AuthorConfig)
    files: FilesConfig = field(default_factory=FilesConfig)
    exclude_merges: bool = True
    timezone: str = "utc"

    def identity_resolver(self) -> IdentityResolver:
        return IdentityResolver(self.author.key, self.author.duplicates)

    def file_filter(self) -> FileFilter:
        return FileFilter(self.files.include, self.files.exclude)

    def commit_policy(self) -> CommitPolicy:
        return CommitPolicy(exclude_merges=self.exclude_merges, timezone=self.timezone)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return value


def _optional_str(section: dict[str, Any], name: str, where: str) -> str | None:
    value = section.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigError(f"'{where}.{name}' must be a string")
    return value


def _str_setting(section: dict[str, Any], name: str, default: str, where: str) -> str:
    value = section.get(name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ConfigError(f"'{where}' must be a string, got {value!r}")
    return value


def _parse_duplicates(raw: Any) -> dict[str, list[str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'author.duplicates' must map a canonical key to a list of aliases")
    duplicates: dict[str, list[str]] = {}
    for canonical, aliases in raw.items():
        if not isinstance(canonical, str):
            raise ConfigError(f"canonical author key {canonical!r} must be a string")
        if aliases is None:
            aliases = []
        elif isinstance(aliases, str):
            aliases = [aliases]
        if not isinstance(aliases, list):
            raise ConfigError(f"aliases of {canonical!r} must be a list")
        for alias in aliases:
            if not isinstance(alias, str):
                raise ConfigError(f"alias {alias!r} of {canonical!r} must be a string")
        duplicates[canonical] = list(aliases)
    return duplicates


def parse_config(data: dict[str, Any] | None) -> Config:
    """Build a Config from an already-parsed YAML document, applying defaults.

    Defaults fill in only absent or null values; anything present with the
    wrong type is a ConfigError.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping")

    paths = data.get("paths")
    if paths is None:
        paths = []
    elif isinstance(paths, str):
        paths = [paths]
    if not isinstance(paths, list):
        raise ConfigError("'paths' must be a list of repository locations")
    for p in paths:
        if not isinstance(p, str):
            raise ConfigError(f"repository path {p!r} must be a string")

    author = _section(data, "author")
    files = _section(data, "files")
    commits = _section(data, "commits")

    exclude_merges = commits.get("exclude_merges", True)
    if not isinstance(exclude_merges, bool):
        raise ConfigError("'commits.exclude_merges' must be true or false")

    return Config(
        paths=list(paths),
        author=AuthorConfig(
            key=_str_setting(author, "key", "name", "author.key"),
            duplicates=_parse_duplicates(author.get("duplicates")),
        ),
        files=FilesConfig(
            include=_optional_str(files, "include", "files"),
            exclude=_optional_str(files, "exclude", "files"),
        ),
        exclude_merges=exclude_merges,
        timezone=_str_setting(data, "timezone", "utc", "timezone"),
    )


def validate_config(config: Config) -> Config:
    """Check everything a run needs before any repository is touched."""
    if config.author.key not in IDENTITY_FIELDS:
        raise ConfigError(
            f"'author.key' must be one of {', '.join(IDENTITY_FIELDS)}, got {config.author.key!r}"
        )
    if config.timezone not in TIMEZONES:
        raise ConfigError(
            f"'timezone' must be one of {', '.join(TIMEZONES)}, got {config.timezone!r}"
        )
    # Compiles the patterns; raises ConfigError on bad syntax.
    config.file_filter()
    if not config.paths:
        raise ConfigError("no repository paths given (use --paths or 'paths' in the config file)")
    return config


def load_config(path: str | Path = DEFAULT_CONFIG_PATH, paths: str | None = None) -> Config:
    """Read the YAML file at ``path`` (missing is fine) and validate it.

    ``paths`` is the comma-separated command-line override; when non-empty it
    replaces the configured repository list.
    """
    config_path = Path(path)
    data: Any = None
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Config file %s not found, using defaults", config_path)
    except OSError as exc:
        raise ConfigError(f"cannot read {config_path}: {exc}") from exc
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {config_path}: {exc}") from exc

    config = parse_config(data)
    if paths and paths.strip():
        override = [p.strip() for p in paths.split(",") if p.strip()]
        config = replace(config, paths=override)
    return validate_config(config)
