"""Journal entry data models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

__all__ = [
    "JournalEntry",
    "UpsertOutcome",
    "UpsertResult",
    "utcnow",
]


def utcnow() -> datetime:
    """Return timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class JournalEntry:
    """One journal record, keyed by a unique calendar date."""

    entry_id: str
    entry_date: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(
        cls,
        *,
        entry_date: str,
        content: str,
        entry_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> "JournalEntry":
        """Factory that generates the ID and stamps both timestamps."""

        ts = timestamp or utcnow()
        return cls(
            entry_id=entry_id or str(uuid4()),
            entry_date=entry_date,
            content=content,
            created_at=ts,
            updated_at=ts,
        )

    def with_content(
        self, content: str, *, timestamp: Optional[datetime] = None
    ) -> "JournalEntry":
        """Return a copy with new content and a refreshed ``updated_at``."""

        ts = timestamp or utcnow()
        return replace(self, content=content, updated_at=max(ts, self.created_at))


class UpsertOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class UpsertResult:
    """Entry returned by a save-by-date call plus what happened to it."""

    entry: JournalEntry
    outcome: UpsertOutcome

    @property
    def created(self) -> bool:
        return self.outcome is UpsertOutcome.CREATED
