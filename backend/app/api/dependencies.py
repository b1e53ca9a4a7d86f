"""Shared API dependencies."""

from __future__ import annotations

from functools import lru_cache

from ..config import Settings, load_settings
from ..domain.journal.gateway import (
    JournalEntryGateway,
    build_journal_entry_gateway,
)

__all__ = [
    "get_entry_gateway",
    "get_settings",
]


@lru_cache()
def get_settings() -> Settings:
    """Return settings loaded once per process."""

    return load_settings()


@lru_cache()
def _entry_gateway_singleton() -> JournalEntryGateway:
    settings = get_settings()
    return build_journal_entry_gateway(
        prefer_postgres=settings.entry_store.backend == "postgres",
        fallback_to_memory=settings.entry_store.fallback_to_memory,
    )


def get_entry_gateway() -> JournalEntryGateway:
    """Return the process-wide journal gateway instance."""

    return _entry_gateway_singleton()