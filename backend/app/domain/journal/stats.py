"""Aggregate statistics over journal entries."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

__all__ = ["JournalStats", "compute_stats", "count_words", "round_half_up"]


@dataclass(frozen=True)
class JournalStats:
    total_entries: int
    avg_words_per_entry: int
    first_entry_date: Optional[str]
    last_entry_date: Optional[str]
    total_words: int

    @classmethod
    def empty(cls) -> "JournalStats":
        return cls(
            total_entries=0,
            avg_words_per_entry=0,
            first_entry_date=None,
            last_entry_date=None,
            total_words=0,
        )


def count_words(content: str) -> int:
    """Count whitespace-delimited tokens."""

    return len(content.split())


def round_half_up(value: float) -> int:
    # Python's round() goes to even; averages round halves up (2.5 -> 3).
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_stats(rows: Iterable[tuple[str, str]]) -> JournalStats:
    """Build stats from ``(entry_date, content)`` pairs in any order."""

    total_entries = 0
    total_words = 0
    first: Optional[str] = None
    last: Optional[str] = None
    for entry_date, content in rows:
        total_entries += 1
        total_words += count_words(content)
        if first is None or entry_date < first:
            first = entry_date
        if last is None or entry_date > last:
            last = entry_date
    if not total_entries:
        return JournalStats.empty()
    return JournalStats(
        total_entries=total_entries,
        avg_words_per_entry=round_half_up(total_words / total_entries),
        first_entry_date=first,
        last_entry_date=last,
        total_words=total_words,
    )
