"""Create journal_entries table with one row per calendar date.

Revision ID: 20261018_journal_entries
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261018_journal_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "journal_entries",
        sa.Column("entry_id", sa.String(length=36), primary_key=True),
        sa.Column("entry_date", sa.String(length=10), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "updated_at >= created_at", name="ck_journal_entries_updated_after_created"
        ),
        sa.CheckConstraint(
            "length(trim(content)) > 0", name="ck_journal_entries_content_not_blank"
        ),
    )
    op.create_index(
        "ux_journal_entries_entry_date",
        "journal_entries",
        ["entry_date"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("ux_journal_entries_entry_date", table_name="journal_entries")
    op.drop_table("journal_entries")
