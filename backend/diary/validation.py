"""
Diary Backend — Validation Rules
==================================

What:  Admissibility checks for every externally supplied value before it
       reaches storage: entry date, entry content, entry id, search keyword.
How:   Pure functions returning Ok(normalized value) or Err(ValidationError).
       They never raise and have no side effects.
Who:   Called by EntryRepository before every read-by-id, write and search,
       and by the request schemas at the HTTP boundary.

Rules:
    date     "YYYY-MM-DD" with 4/2/2 ASCII digits naming a real day in the
             proleptic Gregorian calendar (2024-02-29 ok, 2026-02-29 not)
    content  str, len >= 1, non-empty after strip(), encodable as UTF-8;
             returned untrimmed
    id       int (bool excluded); integral floats normalized to int;
             non-positive ids are legal here (the lookup just misses)
    keyword  str, possibly empty, encodable as UTF-8; None is the only
             "missing" value
"""

import math
import re
from datetime import date
from typing import Any

from diary.exceptions import (
    EmptyContentError,
    InvalidDateError,
    InvalidIdError,
    MissingKeywordError,
)
from diary.result import Err, Ok, Result

DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def _is_utf8_text(value: str) -> bool:
    """False for strings holding lone surrogates, which no store can encode."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_date(value: Any) -> Result[str]:
    # The ASCII-only pattern also keeps surrogates out of dates
    if not isinstance(value, str):
        return Err(InvalidDateError("Date must be a string"))
    if not DATE_PATTERN.fullmatch(value):
        return Err(InvalidDateError("Date must be in YYYY-MM-DD format"))

    year, month, day = (int(part) for part in value.split("-"))
    try:
        parsed = date(year, month, day)
    except ValueError:
        return Err(InvalidDateError("Invalid date"))

    # The round trip also rejects anything date() would have normalized
    if parsed.isoformat() != value:
        return Err(InvalidDateError("Invalid date"))
    return Ok(value)


def validate_content(value: Any) -> Result[str]:
    if not isinstance(value, str):
        return Err(EmptyContentError("Content must be a string"))
    if len(value) < 1:
        return Err(EmptyContentError("Content must not be empty"))
    if not value.strip():
        return Err(EmptyContentError("Content must not be only whitespace"))
    if not _is_utf8_text(value):
        return Err(EmptyContentError("Content must be valid text"))
    return Ok(value)


def validate_id(value: Any) -> Result[int]:
    """
    Check that `value` is a well-formed integer identifier.

    A malformed type is an error; a well-formed but non-positive value is
    not (the repository treats it as a miss).
    """
    if isinstance(value, bool):
        return Err(InvalidIdError("ID must be an integer"))
    if isinstance(value, int):
        return Ok(value)
    if isinstance(value, float):
        if math.isnan(value):
            return Err(InvalidIdError("ID must be a valid number"))
        if math.isinf(value) or not value.is_integer():
            return Err(InvalidIdError("ID must be an integer"))
        return Ok(int(value))
    return Err(InvalidIdError("ID must be an integer"))


def validate_keyword(value: Any) -> Result[str]:
    if value is None:
        return Err(MissingKeywordError("Search keyword is required"))
    if not isinstance(value, str):
        return Err(MissingKeywordError("Search keyword must be a string"))
    if not _is_utf8_text(value):
        return Err(MissingKeywordError("Search keyword must be valid text"))
    return Ok(value)


def validate_entry_fields(entry_date: Any, content: Any) -> Result[tuple]:
    """
    Validate a date/content pair, date first.

    Returns Ok((date, content)) or the first Err encountered.
    """
    checked_date = validate_date(entry_date)
    if isinstance(checked_date, Err):
        return checked_date
    checked_content = validate_content(content)
    if isinstance(checked_content, Err):
        return checked_content
    return Ok((checked_date.value, checked_content.value))
