"""Client for the journal HTTP API."""

from .journal_client import (
    EntryCache,
    JournalApiError,
    JournalClient,
    RemoteEntry,
    RemoteStats,
)

__all__ = [
    "EntryCache",
    "JournalApiError",
    "JournalClient",
    "RemoteEntry",
    "RemoteStats",
]
