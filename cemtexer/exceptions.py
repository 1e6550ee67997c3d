"""cemtexer exception hierarchy.

Only fatal conditions are raised. Field-level validation failures travel as
``ValidationIssue`` values and end up in the report instead.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from .utils import ValidationIssue


class CemtexError(Exception):
    """Base exception for all cemtexer errors."""


class StructuralError(CemtexError):
    """The input file cannot be split into header, transactions and trailer."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue] = ()) -> None:
        self.issues = list(issues)
        super().__init__(message)


class ConfigurationError(CemtexError):
    """The originator settings source is unusable."""

    def __init__(self, message: str, missing_keys: Iterable[str] = ()) -> None:
        self.missing_keys = list(missing_keys)
        super().__init__(message)


class SettingsValidationError(CemtexError):
    """Every settings key is present but one or more values break a field rule."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        super().__init__("Settings validation failed: " + "; ".join(self.messages))


class RowSourceError(CemtexError):
    """The payment row source could not be read as rows."""


class RowValidationError(CemtexError):
    """At least one payment row breaks a field rule; nothing was generated."""

    def __init__(self, failures: Mapping[int, Sequence[str]]) -> None:
        self.failures = {row: list(messages) for row, messages in failures.items()}
        super().__init__(f"{len(self.failures)} payment row(s) failed validation")


__all__ = [
    "CemtexError",
    "ConfigurationError",
    "RowSourceError",
    "RowValidationError",
    "SettingsValidationError",
    "StructuralError",
]
