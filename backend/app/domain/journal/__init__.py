"""Journal entry domain: models, errors, stats and gateways."""

from .errors import (
    JournalEntryNotFoundError,
    JournalError,
    JournalStorageError,
    JournalValidationError,
)
from .gateway import (
    InMemoryJournalEntryGateway,
    JournalEntryGateway,
    PostgresJournalEntryGateway,
    build_journal_entries_table,
    build_journal_entry_gateway,
)
from .models import JournalEntry, UpsertOutcome, UpsertResult
from .stats import JournalStats, compute_stats

__all__ = [
    "InMemoryJournalEntryGateway",
    "JournalEntry",
    "JournalEntryGateway",
    "JournalEntryNotFoundError",
    "JournalError",
    "JournalStats",
    "JournalStorageError",
    "JournalValidationError",
    "PostgresJournalEntryGateway",
    "UpsertOutcome",
    "UpsertResult",
    "build_journal_entries_table",
    "build_journal_entry_gateway",
    "compute_stats",
]
