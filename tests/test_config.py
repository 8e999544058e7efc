"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from gitlitics.config import Config, load_config, parse_config, validate_config
from gitlitics.errors import ConfigError
from gitlitics.filters import FileFilter
from gitlitics.identity import IdentityResolver

FULL_CONFIG = """
paths:
  - https://git.example.com/team/service.git
  - /srv/repos/tools
author:
  key: mail
  duplicates:
    alice@x.com: [alice@old.com, a.smith@x.com]
    bob@x.com: bob@home.net
files:
  include: '\\.go$'
  exclude: '_test\\.go$'
commits:
  exclude_merges: false
timezone: local
"""


def test_load_full_config(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text(FULL_CONFIG, encoding="utf-8")
    config = load_config(path)
    assert config.paths == ["https://git.example.com/team/service.git", "/srv/repos/tools"]
    assert config.author.key == "mail"
    assert config.author.duplicates == {
        "alice@x.com": ["alice@old.com", "a.smith@x.com"],
        "bob@x.com": ["bob@home.net"],
    }
    assert config.files.include == r"\.go$"
    assert config.files.exclude == r"_test\.go$"
    assert config.exclude_merges is False
    assert config.timezone == "local"


def test_defaults_applied():
    config = parse_config({"paths": ["repo"]})
    assert config.author.key == "name"
    assert config.author.duplicates == {}
    assert config.files.include is None
    assert config.files.exclude is None
    assert config.exclude_merges is True
    assert config.timezone == "utc"


def test_missing_file_uses_defaults_with_cli_paths(tmp_path):
    config = load_config(tmp_path / "absent.yml", paths="a.git, b.git")
    assert config.paths == ["a.git", "b.git"]
    assert config.author.key == "name"


def test_cli_paths_override_file(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text("paths: [from-file]\nauthor: {key: mail}\n", encoding="utf-8")
    config = load_config(path, paths="from-cli")
    assert config.paths == ["from-cli"]
    assert config.author.key == "mail"


def test_blank_cli_paths_keep_file_paths(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text("paths: [from-file]\n", encoding="utf-8")
    assert load_config(path, paths="  ").paths == ["from-file"]


def test_no_paths_is_error(tmp_path):
    with pytest.raises(ConfigError, match="no repository paths"):
        load_config(tmp_path / "absent.yml")


def test_invalid_author_key(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text("paths: [r]\nauthor: {key: login}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="author.key"):
        load_config(path)


def test_invalid_timezone():
    with pytest.raises(ConfigError, match="timezone"):
        validate_config(parse_config({"paths": ["r"], "timezone": "mars"}))


def test_malformed_pattern(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text("paths: [r]\nfiles: {include: '(unclosed'}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="include"):
        load_config(path)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text("paths: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config(path)


@pytest.mark.parametrize(
    "data",
    [
        ["not", "a", "mapping"],
        {"paths": 42},
        {"paths": ["r"], "author": "alice"},
        {"paths": ["r"], "author": {"duplicates": ["a", "b"]}},
        {"paths": ["r"], "author": {"duplicates": {"a": 1}}},
        {"paths": ["r"], "commits": {"exclude_merges": "yes"}},
        {"paths": ["r"], "files": {"include": 3}},
        {"paths": ["r"], "author": {"key": False}},
        {"paths": ["r"], "author": {"key": 1}},
        {"paths": ["r"], "timezone": 0},
        {"paths": ["r"], "timezone": False},
        {"paths": [1, "r"]},
        {"paths": ["r"], "author": {"duplicates": {"x": [1, None]}}},
        {"paths": ["r"], "author": {"duplicates": {"x": ["ok", None]}}},
        {"paths": ["r"], "author": {"duplicates": {42: ["alias"]}}},
        False,
    ],
)
def test_malformed_structure(data):
    with pytest.raises(ConfigError):
        parse_config(data)


def test_factories():
    config = Config(paths=["r"])
    assert isinstance(config.identity_resolver(), IdentityResolver)
    assert isinstance(config.file_filter(), FileFilter)
    policy = config.commit_policy()
    assert policy.exclude_merges is True
    assert policy.timezone == "utc"


def test_false_author_key_is_rejected(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text("paths: [a]\nauthor: {key: false}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="author.key"):
        load_config(path)


def test_null_aliases_are_rejected(tmp_path):
    path = tmp_path / "gitlitics.yml"
    path.write_text("paths: [a]\nauthor: {duplicates: {x: [1, null]}}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="alias"):
        load_config(path)


def test_null_values_take_defaults():
    config = parse_config({"paths": ["r"], "author": {"key": None, "duplicates": {"x": None}}, "timezone": None})
    assert config.author.key == "name"
    assert config.author.duplicates == {"x": []}
    assert config.timezone == "utc"
