"""
Diary Backend — Entry SQLAlchemy Model
========================================

What:  ORM model representing the `entries` table.
How:   Inherits from the shared DeclarativeBase; `Database.create_schema()`
       and Alembic both read this table definition.
Who:   Used only by EntryRepository. Rows never leave the repository; callers
       receive EntryRecord copies.

Table Design:
    - id: INTEGER PRIMARY KEY AUTOINCREMENT. On SQLite the AUTOINCREMENT
      keyword guarantees ids increase with every insert and are never reused,
      even after the highest row is deleted.
    - date: "YYYY-MM-DD" text. Lexicographic order equals calendar order.
    - content: TEXT, stored verbatim.
    - created_at / updated_at: ISO-8601 UTC text with millisecond precision,
      e.g. "2026-01-29T08:15:30.123Z". Fixed width, so string comparison
      equals chronological comparison.

    Index on date DESC:
        Serves the default listing order (date DESC, id DESC).
"""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from diary.database import Base

# Largest value the INTEGER primary key can hold (signed 64-bit)
MAX_ENTRY_ID = 2**63 - 1


class Entry(Base):
    """
    One diary record.

    Query Patterns:
        - List all:   ORDER BY date DESC, id DESC → idx_entries_date
        - Get one:    WHERE id = :id → primary key
        - Search:     WHERE lower(content) LIKE lower(:pattern) ESCAPE '\\'
    """

    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    date: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    created_at: Mapped[str] = mapped_column(
        String(24),
        nullable=False,
    )

    updated_at: Mapped[str] = mapped_column(
        String(24),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_entries_date", date.desc()),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, date='{self.date}', updated_at='{self.updated_at}')>"
