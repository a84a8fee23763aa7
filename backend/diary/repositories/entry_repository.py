"""
Diary Backend — Entry Repository (Persistence Layer)
======================================================

What:  Durable storage and retrieval of diary entries.
How:   Every operation opens one transactional session from the Database
       handle it was constructed with, runs parameterized SQLAlchemy
       statements, and converts rows into frozen EntryRecord copies.
Who:   Called by EntryService; the only component that mutates `entries`.

Guarantees:
    - Input is validated here regardless of what callers checked before.
    - Writes are atomic per call (one session, commit or rollback).
    - Values are always bound parameters; nothing is formatted into SQL.
    - Listing and search order: date DESC, id DESC.
    - Store failures are logged and re-raised as DatabaseError.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from diary.database import Database
from diary.exceptions import DatabaseError
from diary.models.entry import MAX_ENTRY_ID, Entry
from diary.result import Err, Ok, Result
from diary.schemas.entry import EntryRecord
from diary.validation import (
    validate_entry_fields,
    validate_id,
    validate_keyword,
)

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"

_ORDERING = (Entry.date.desc(), Entry.id.desc())


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def escape_like(keyword: str) -> str:
    """
    Escape LIKE metacharacters so the keyword matches literally.

    The escape character goes first, otherwise the backslashes added for
    `%` and `_` would themselves be doubled.
    """
    return (
        keyword.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _in_key_range(entry_id: int) -> bool:
    """Ids outside the primary key's range can never match a row."""
    return 0 < entry_id <= MAX_ENTRY_ID


def _to_record(row: Entry) -> EntryRecord:
    return EntryRecord.model_validate(row)


class EntryRepository:
    """
    Persistence layer for diary entries.

    Operations:
        create(date, content)        → Result[EntryRecord]
        find_all()                   → List[EntryRecord]
        find_by_id(id)               → Result[Optional[EntryRecord]]
        update(id, date, content)    → Result[Optional[EntryRecord]]
        delete(id)                   → bool
        search(keyword)              → Result[List[EntryRecord]]

    "Absent" is Ok(None) / False, never an exception.
    """

    def __init__(self, database: Database):
        self._database = database

    async def create(self, date: str, content: str) -> Result[EntryRecord]:
        """
        Insert a new entry.

        Validation order: date, then content; the first failure is returned.
        created_at and updated_at receive the same timestamp.
        """
        checked = validate_entry_fields(date, content)
        if isinstance(checked, Err):
            return checked
        valid_date, valid_content = checked.value

        now = utc_timestamp()
        try:
            async with self._database.session() as session:
                row = Entry(
                    date=valid_date,
                    content=valid_content,
                    created_at=now,
                    updated_at=now,
                )
                session.add(row)
                await session.flush()  # Assigns the AUTOINCREMENT id
                record = _to_record(row)
        except SQLAlchemyError as e:
            logger.error("Database error creating entry: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create", "error_type": type(e).__name__})

        logger.info("Entry %d created for %s", record.id, record.date)
        return Ok(record)

    async def find_all(self) -> List[EntryRecord]:
        """Every entry, newest date first, same-day ties by id descending."""
        try:
            async with self._database.session() as session:
                result = await session.execute(select(Entry).order_by(*_ORDERING))
                return [_to_record(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing entries: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "find_all", "error_type": type(e).__name__})

    async def find_by_id(self, entry_id: int) -> Result[Optional[EntryRecord]]:
        """
        Look up one entry.

        Malformed id → Err(InvalidIdError); an id outside 1..MAX_ENTRY_ID
        or unknown → Ok(None).
        """
        checked = validate_id(entry_id)
        if isinstance(checked, Err):
            return checked
        if not _in_key_range(checked.value):
            return Ok(None)

        try:
            async with self._database.session() as session:
                row = await session.get(Entry, checked.value)
                return Ok(_to_record(row) if row is not None else None)
        except SQLAlchemyError as e:
            logger.error("Database error fetching entry %s: %s", entry_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "find_by_id", "entry_id": entry_id})

    async def update(self, entry_id: int, date: str, content: str) -> Result[Optional[EntryRecord]]:
        """
        Replace date and content of an existing entry.

        Validation order: id, date, content. A miss returns Ok(None) without
        writing anything. updated_at is the wall-clock time of this call,
        never earlier than the stored value; id and created_at are kept.
        """
        checked_id = validate_id(entry_id)
        if isinstance(checked_id, Err):
            return checked_id
        checked = validate_entry_fields(date, content)
        if isinstance(checked, Err):
            return checked
        valid_date, valid_content = checked.value

        if not _in_key_range(checked_id.value):
            return Ok(None)

        try:
            async with self._database.session() as session:
                row = await session.get(Entry, checked_id.value)
                if row is None:
                    return Ok(None)
                row.date = valid_date
                row.content = valid_content
                row.updated_at = max(utc_timestamp(), row.updated_at)
                await session.flush()
                record = _to_record(row)
        except SQLAlchemyError as e:
            logger.error("Database error updating entry %s: %s", entry_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "update", "entry_id": entry_id})

        logger.info("Entry %d updated", record.id)
        return Ok(record)

    async def delete(self, entry_id: int) -> bool:
        """
        Hard-delete one entry.

        Malformed, out-of-range or unknown ids return False with no effect.
        """
        checked = validate_id(entry_id)
        if isinstance(checked, Err) or not _in_key_range(checked.value):
            return False

        try:
            async with self._database.session() as session:
                result = await session.execute(
                    delete(Entry).where(Entry.id == checked.value)
                )
                deleted = result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("Database error deleting entry %s: %s", entry_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "delete", "entry_id": entry_id})

        if deleted:
            logger.info("Entry %d deleted", checked.value)
        return deleted

    async def search(self, keyword: Optional[str]) -> Result[List[EntryRecord]]:
        """
        Case-insensitive substring search over content.

        `%`, `_` and `\\` in the keyword match literally. The empty keyword
        matches every entry. Ordering matches find_all().

        Query:
            SELECT ... WHERE lower(content) LIKE lower(:pattern) ESCAPE '\\'
            ORDER BY date DESC, id DESC
        """
        checked = validate_keyword(keyword)
        if isinstance(checked, Err):
            return checked

        pattern = f"%{escape_like(checked.value)}%"
        try:
            async with self._database.session() as session:
                result = await session.execute(
                    select(Entry)
                    .where(Entry.content.ilike(pattern, escape=LIKE_ESCAPE))
                    .order_by(*_ORDERING)
                )
                return Ok([_to_record(row) for row in result.scalars().all()])
        except SQLAlchemyError as e:
            logger.error("Database error searching entries: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "search", "error_type": type(e).__name__})
