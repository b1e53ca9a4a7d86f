"""Journal entry gateway implementations."""

from __future__ import annotations

import re
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    delete,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...infra.db import get_engine
from ...infra.logging import get_logger
from .errors import (
    JournalEntryNotFoundError,
    JournalStorageError,
    JournalValidationError,
)
from .models import JournalEntry, UpsertOutcome, UpsertResult
from .stats import JournalStats, compute_stats

__all__ = [
    "JournalEntryGateway",
    "InMemoryJournalEntryGateway",
    "PostgresJournalEntryGateway",
    "build_journal_entry_gateway",
    "build_journal_entries_table",
    "normalize_content",
    "normalize_entry_date",
    "normalize_query",
]

logger = get_logger(__name__)

JOURNAL_ENTRIES_TABLE = "journal_entries"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class JournalEntryGateway(Protocol):  # pragma: no cover
    """Persistence contract for journal entries keyed by calendar date."""

    def list_entries(self) -> List[JournalEntry]: ...

    def get_entry_by_date(self, entry_date: str) -> JournalEntry: ...

    def upsert_entry(self, entry_date: str, content: str) -> UpsertResult: ...

    def update_entry_content(self, entry_id: str, content: str) -> JournalEntry: ...

    def delete_entry(self, entry_id: str) -> None: ...

    def search_entries(self, query: str) -> List[JournalEntry]: ...

    def get_stats(self) -> JournalStats: ...


def normalize_entry_date(value: Optional[str]) -> str:
    """Return a trimmed ``YYYY-MM-DD`` string or raise a validation error."""

    if value is None or not str(value).strip():
        raise JournalValidationError("date is required", field="date")
    trimmed = str(value).strip()
    if not DATE_PATTERN.fullmatch(trimmed):
        raise JournalValidationError("date must use the YYYY-MM-DD form", field="date")
    try:
        date.fromisoformat(trimmed)
    except ValueError as exc:
        raise JournalValidationError(
            f"date {trimmed} is not a calendar date", field="date"
        ) from exc
    return trimmed


def normalize_content(value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise JournalValidationError("content cannot be empty", field="content")
    return str(value).strip()


def normalize_query(value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise JournalValidationError("search query is required", field="q")
    return str(value).strip()


class InMemoryJournalEntryGateway(JournalEntryGateway):
    """Dict-backed journal store used for local development and tests."""

    def __init__(self) -> None:
        self._entries: Dict[str, JournalEntry] = {}
        self._date_index: Dict[str, str] = {}

    def list_entries(self) -> List[JournalEntry]:
        return _sort_newest_first(self._entries.values())

    def get_entry_by_date(self, entry_date: str) -> JournalEntry:
        key = (entry_date or "").strip()
        entry_id = self._date_index.get(key)
        if entry_id is None:
            raise JournalEntryNotFoundError(entry_date=key)
        return self._entries[entry_id]

    def upsert_entry(self, entry_date: str, content: str) -> UpsertResult:
        entry_date = normalize_entry_date(entry_date)
        content = normalize_content(content)
        entry_id = self._date_index.get(entry_date)
        if entry_id is not None:
            updated = self._entries[entry_id].with_content(content)
            self._entries[entry_id] = updated
            return UpsertResult(entry=updated, outcome=UpsertOutcome.UPDATED)

        record = JournalEntry.new(entry_date=entry_date, content=content)
        self._entries[record.entry_id] = record
        self._date_index[entry_date] = record.entry_id
        return UpsertResult(entry=record, outcome=UpsertOutcome.CREATED)

    def update_entry_content(self, entry_id: str, content: str) -> JournalEntry:
        content = normalize_content(content)
        record = self._entries.get(entry_id)
        if record is None:
            raise JournalEntryNotFoundError(entry_id=entry_id)
        updated = record.with_content(content)
        self._entries[entry_id] = updated
        return updated

    def delete_entry(self, entry_id: str) -> None:
        record = self._entries.pop(entry_id, None)
        if record is None:
            raise JournalEntryNotFoundError(entry_id=entry_id)
        self._date_index.pop(record.entry_date, None)

    def search_entries(self, query: str) -> List[JournalEntry]:
        needle = normalize_query(query).lower()
        matches = [
            entry for entry in self._entries.values() if needle in entry.content.lower()
        ]
        return _sort_newest_first(matches)

    def get_stats(self) -> JournalStats:
        return compute_stats(
            (entry.entry_date, entry.content) for entry in self._entries.values()
        )


class PostgresJournalEntryGateway(JournalEntryGateway):
    """SQLAlchemy-backed adapter that persists entries to PostgreSQL."""

    def __init__(
        self,
        engine: Optional[Engine] = None,
        *,
        table: Optional[Table] = None,
    ) -> None:
        self._engine = engine or get_engine()
        if table is not None:
            self._entries = table
        else:
            self._entries = Table(
                JOURNAL_ENTRIES_TABLE, MetaData(), autoload_with=self._engine
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_entries(self) -> List[JournalEntry]:
        table = self._entries
        stmt = select(table).order_by(table.c.entry_date.desc())
        with self._begin("list_entries") as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_entry(row) for row in rows]

    def get_entry_by_date(self, entry_date: str) -> JournalEntry:
        key = (entry_date or "").strip()
        stmt = select(self._entries).where(self._entries.c.entry_date == key)
        with self._begin("get_entry_by_date") as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            raise JournalEntryNotFoundError(entry_date=key)
        return _row_to_entry(row)

    def search_entries(self, query: str) -> List[JournalEntry]:
        needle = normalize_query(query).lower()
        table = self._entries
        stmt = (
            select(table)
            .where(func.lower(table.c.content).contains(needle, autoescape=True))
            .order_by(table.c.entry_date.desc())
        )
        with self._begin("search_entries") as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_entry(row) for row in rows]

    def get_stats(self) -> JournalStats:
        table = self._entries
        stmt = select(table.c.entry_date, table.c.content)
        with self._begin("get_stats") as conn:
            rows = conn.execute(stmt).all()
        return compute_stats((row.entry_date, row.content) for row in rows)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def upsert_entry(self, entry_date: str, content: str) -> UpsertResult:
        entry_date = normalize_entry_date(entry_date)
        content = normalize_content(content)
        table = self._entries
        with self._begin("upsert_entry") as conn:
            existing = (
                conn.execute(select(table).where(table.c.entry_date == entry_date))
                .mappings()
                .first()
            )
            if existing is not None:
                current = _row_to_entry(existing)
                updated = current.with_content(content)
                stmt = (
                    update(table)
                    .where(table.c.entry_id == current.entry_id)
                    .values(content=updated.content, updated_at=updated.updated_at)
                    .returning(table)
                )
                row = conn.execute(stmt).mappings().first()
                outcome = UpsertOutcome.UPDATED
            else:
                record = JournalEntry.new(entry_date=entry_date, content=content)
                stmt = (
                    insert(table)
                    .values(
                        entry_id=record.entry_id,
                        entry_date=record.entry_date,
                        content=record.content,
                        created_at=record.created_at,
                        updated_at=record.updated_at,
                    )
                    .returning(table)
                )
                row = conn.execute(stmt).mappings().first()
                outcome = UpsertOutcome.CREATED
        if row is None:  # pragma: no cover
            raise JournalStorageError("failed to save journal entry")
        return UpsertResult(entry=_row_to_entry(row), outcome=outcome)

    def update_entry_content(self, entry_id: str, content: str) -> JournalEntry:
        content = normalize_content(content)
        table = self._entries
        with self._begin("update_entry_content") as conn:
            existing = (
                conn.execute(select(table).where(table.c.entry_id == entry_id))
                .mappings()
                .first()
            )
            if existing is None:
                raise JournalEntryNotFoundError(entry_id=entry_id)
            updated = _row_to_entry(existing).with_content(content)
            stmt = (
                update(table)
                .where(table.c.entry_id == entry_id)
                .values(content=updated.content, updated_at=updated.updated_at)
                .returning(table)
            )
            row = conn.execute(stmt).mappings().first()
        if row is None:  # pragma: no cover
            raise JournalEntryNotFoundError(entry_id=entry_id)
        return _row_to_entry(row)

    def delete_entry(self, entry_id: str) -> None:
        stmt = delete(self._entries).where(self._entries.c.entry_id == entry_id)
        with self._begin("delete_entry") as conn:
            deleted = conn.execute(stmt).rowcount
        if not deleted:
            raise JournalEntryNotFoundError(entry_id=entry_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _begin(self, operation: str) -> Iterator[Connection]:
        """Open a transaction, translating SQLAlchemy failures."""

        try:
            with self._engine.begin() as conn:
                yield conn
        except IntegrityError as exc:
            raise JournalStorageError(
                f"journal store constraint violated during {operation}"
            ) from exc
        except SQLAlchemyError as exc:
            raise JournalStorageError(
                f"journal store failed during {operation}"
            ) from exc


def build_journal_entries_table(metadata: Optional[MetaData] = None) -> Table:
    """Return the ``journal_entries`` table definition bound to ``metadata``."""

    return Table(
        JOURNAL_ENTRIES_TABLE,
        metadata if metadata is not None else MetaData(),
        Column("entry_id", String(length=36), primary_key=True),
        Column("entry_date", String(length=10), nullable=False),
        Column("content", Text(), nullable=False),
        Column("created_at", DateTime(timezone=True), nullable=False),
        Column("updated_at", DateTime(timezone=True), nullable=False),
        Index("ux_journal_entries_entry_date", "entry_date", unique=True),
    )


def build_journal_entry_gateway(
    *,
    prefer_postgres: bool = True,
    fallback_to_memory: bool = False,
    engine: Optional[Engine] = None,
) -> JournalEntryGateway:
    """Factory that returns the desired journal gateway implementation."""

    if prefer_postgres:
        try:
            return PostgresJournalEntryGateway(engine)
        except Exception:
            if not fallback_to_memory:
                raise
            logger.warning(
                "postgres_journal_store_unavailable_falling_back",
                exc_info=True,
            )
    return InMemoryJournalEntryGateway()


def _sort_newest_first(entries) -> List[JournalEntry]:
    return sorted(entries, key=lambda entry: entry.entry_date, reverse=True)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_entry(row: Mapping[str, Any]) -> JournalEntry:
    return JournalEntry(
        entry_id=row["entry_id"],
        entry_date=row["entry_date"],
        content=row["content"],
        created_at=_as_utc(row["created_at"]),
        updated_at=_as_utc(row["updated_at"]),
    )
