"""Exceptions raised by gitlitics."""

from __future__ import annotations


class GitliticsError(Exception):
    """Base exception for all gitlitics errors."""


class ConfigError(GitliticsError):
    """Invalid configuration: bad YAML, unknown identity field, malformed pattern."""


class RetrievalError(GitliticsError):
    """A repository could not be cloned, opened or walked."""

    def __init__(self, message: str, location: str | None = None) -> None:
        super().__init__(message)
        self.location = location

    def __str__(self) -> str:
        message = super().__str__()
        if self.location:
            return f"{self.location}: {message}"
        return message
