"""
Diary Backend — Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI validates request bodies against EntryPayload and serializes
       EntryRecord / ErrorResponse / HealthResponse on the way out.
Who:   EntryRecord is also the value type returned by the repository.

Design Decision:
    Schemas are separate from the SQLAlchemy model so that callers only ever
    receive frozen copies of a row, never the live ORM object.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, StrictStr, field_validator

from diary.result import Err
from diary.validation import validate_content, validate_date


# ══════════════════════════════════════════════════════════════════════════
# Entry Record — what the repository returns and the API serializes
# ══════════════════════════════════════════════════════════════════════════


class EntryRecord(BaseModel):
    """
    Immutable snapshot of one stored entry.

    JSON shape:
        {
            "id": 1,
            "date": "2026-01-29",
            "content": "Entry 1",
            "created_at": "2026-01-29T08:15:30.123Z",
            "updated_at": "2026-01-29T08:15:30.123Z"
        }
    """
    id: int = Field(description="Store-assigned identifier")
    date: str = Field(description="Entry date (YYYY-MM-DD)")
    content: str = Field(description="Entry text, stored verbatim")
    created_at: str = Field(description="Creation time (UTC ISO 8601, ms precision)")
    updated_at: str = Field(description="Last update time (UTC ISO 8601, ms precision)")

    model_config = {"from_attributes": True, "frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Request Body — POST /api/entries and PUT /api/entries/{id}
# ══════════════════════════════════════════════════════════════════════════


class EntryPayload(BaseModel):
    """
    Request body for creating or replacing an entry.

    StrictStr rejects numbers and other non-string JSON values before the
    field validators run. The validators reuse diary.validation so the HTTP
    boundary and the repository apply identical rules.
    """
    date: StrictStr = Field(description="Entry date (YYYY-MM-DD)")
    content: StrictStr = Field(description="Entry text (not blank)")

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        result = validate_date(v)
        if isinstance(result, Err):
            raise ValueError(result.error.message)
        return result.value

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        result = validate_content(v)
        if isinstance(result, Err):
            raise ValueError(result.error.message)
        return result.value


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "message": "Validation Error",
            "details": ["'date': Invalid date"]
        }
    """
    message: str = Field(description="Human-readable error description")
    details: Optional[List[str]] = Field(default=None, description="Per-field failure messages")


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
