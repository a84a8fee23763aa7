"""Create entries table

Revision ID: 001
Revises: None
Create Date: 2026-01-29 00:00:00.000000+00:00

What:  Creates the `entries` table and its date index.
How:   Mirrors diary/models/entry.py. On SQLite the primary key is declared
       AUTOINCREMENT so deleted ids are never handed out again.

Rollback: downgrade() drops the table (all entries are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        # YYYY-MM-DD
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        # ISO-8601 UTC, millisecond precision, Z suffix
        sa.Column("created_at", sa.String(24), nullable=False),
        sa.Column("updated_at", sa.String(24), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    op.create_index(
        "idx_entries_date",
        "entries",
        [sa.text("date DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_entries_date", table_name="entries")
    op.drop_table("entries")
