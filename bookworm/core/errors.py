"""Exceptions raised by the bookworm search engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class BookwormError(Exception):
    """Base exception for bookworm errors."""


class InputError(BookwormError):
    """Raised for navigation input that cannot produce a query.

    Examples are a metadata path without a value, or a metadata field
    that has no predicate builder.
    """


class UnknownFilterError(BookwormError, KeyError):
    """Raised when a filter update names a field FilterCriteria lacks."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Unknown filter field: {self.key!r}"


class ExecutorError(BookwormError):
    """Raised by a query executor when a query fails.

    Attributes:
        message: Human-readable failure description.
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class ConfigError(BookwormError):
    """Raised when a config file cannot be parsed or holds invalid values.

    Attributes:
        message: Error description.
        line: Line of a TOML syntax error, if known.
        path: The config file, if known.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        path: Optional[Path] = None,
    ):
        self.message = message
        self.line = line
        self.path = path

        where = f"Error in {path}" if path is not None else ""
        if line is not None:
            where = f"{where} at line {line}".strip()
        super().__init__(f"{where}: {message}" if where else message)
