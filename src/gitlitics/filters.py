"""File filtering by include/exclude regular expressions."""

from __future__ import annotations

import re

from .errors import ConfigError


def _compile(pattern: str | None, label: str) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"invalid {label} pattern {pattern!r}: {exc}") from exc


class FileFilter:
    """Decide whether a file's changes count toward statistics.

    Patterns are searched anywhere in the recorded path. An exclude match
    wins over an include match; with no patterns every file is admitted.
    """

    def __init__(self, include: str | None = None, exclude: str | None = None) -> None:
        self.include = include or None
        self.exclude = exclude or None
        self._include = _compile(include, "include")
        self._exclude = _compile(exclude, "exclude")

    def included(self, path: str) -> bool:
        if self._include is not None and not self._include.search(path):
            return False
        if self._exclude is not None and self._exclude.search(path):
            return False
        return True

    __call__ = included

    def __repr__(self) -> str:
        return f"FileFilter(include={self.include!r}, exclude={self.exclude!r})"


def included(path: str, include: str | None = None, exclude: str | None = None) -> bool:
    """One-off form of :meth:`FileFilter.included`."""
    return FileFilter(include, exclude).included(path)
