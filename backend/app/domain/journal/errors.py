"""Errors raised by journal entry gateways."""

from __future__ import annotations

__all__ = [
    "JournalError",
    "JournalValidationError",
    "JournalEntryNotFoundError",
    "JournalStorageError",
]


class JournalError(Exception):
    """Base class for journal store failures."""


class JournalValidationError(JournalError, ValueError):
    """A required field is missing, empty or malformed."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class JournalEntryNotFoundError(JournalError, LookupError):
    """No entry exists for the requested date or id."""

    def __init__(self, *, entry_id: str | None = None, entry_date: str | None = None) -> None:
        if entry_id is not None:
            message = f"Entry {entry_id} not found"
        else:
            message = f"No entry for date {entry_date}"
        super().__init__(message)
        self.entry_id = entry_id
        self.entry_date = entry_date


class JournalStorageError(JournalError, RuntimeError):
    """The persistence layer failed to complete an operation."""
