"""Seed script for the journal_entries table.

Upserts a handful of dated entries so local UIs and API calls have data to
read. Re-running the script refreshes the same dates instead of duplicating.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from sqlalchemy import MetaData, Table, create_engine
from sqlalchemy.dialects.postgresql import insert as pg_insert

from backend.app.config import load_settings


def build_seed_entries(timestamp: datetime) -> List[dict[str, object]]:
    """Return static seed data for journal entries."""

    samples = {
        "2024-01-01": "New year, new notebook. Walked along the river and planned the week.",
        "2024-01-02": "Back at work. Long standup, short lunch, good progress on the parser.",
        "2024-01-03": "Rainy day. Read two chapters and cooked soup for the neighbours.",
    }
    return [
        {
            "entry_id": str(uuid4()),
            "entry_date": entry_date,
            "content": content,
            "created_at": timestamp,
            "updated_at": timestamp,
        }
        for entry_date, content in samples.items()
    ]


def seed_entries() -> int:
    settings = load_settings()
    engine = create_engine(settings.database_url, future=True)
    metadata_obj = MetaData()
    entries_table = Table("journal_entries", metadata_obj, autoload_with=engine)

    records = build_seed_entries(datetime.now(timezone.utc))
    stmt = pg_insert(entries_table).values(records)
    update_cols = {col: stmt.excluded[col] for col in ["content", "updated_at"]}

    with engine.begin() as conn:
        conn.execute(
            stmt.on_conflict_do_update(
                index_elements=[entries_table.c.entry_date], set_=update_cols
            )
        )

    return len(records)


def main() -> None:
    inserted = seed_entries()
    print(f"Seeded {inserted} journal entries.")


if __name__ == "__main__":
    main()
