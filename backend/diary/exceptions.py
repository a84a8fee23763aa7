"""
Diary Backend — Custom Exception Hierarchy
============================================

What:  Application-specific error kinds and their HTTP status mapping.
How:   Each exception carries a user-facing message and an optional context
       dict. Validation errors also carry the offending field name.
       `status_code_for()` maps an error kind to its HTTP status; the global
       handlers in main.py use it and never inspect anything else.
Who:   Validation errors are produced by diary.validation (wrapped in Err),
       NotFoundError by the routes, DatabaseError by the repository.

Exception Hierarchy:
    DiaryError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    │   ├── InvalidDateError
    │   ├── EmptyContentError
    │   ├── InvalidIdError
    │   └── MissingKeywordError
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional

# Body text of every 500 response; details stay in the server log
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class DiaryError(Exception):
    """
    Base exception for all diary application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DiaryError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request

    Example response:
        {
            "message": "Validation Error",
            "details": ["'date': Invalid date"]
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    @property
    def detail(self) -> str:
        """Single `'<field>': <message>` line for the response details list."""
        if self.field:
            return f"'{self.field}': {self.message}"
        return self.message

    def __eq__(self, other: object) -> bool:
        return (
            type(self) is type(other)
            and self.field == other.field  # type: ignore[attr-defined]
            and self.message == other.message  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self), self.field, self.message))


class InvalidDateError(ValidationError):
    """Date is not a YYYY-MM-DD string naming a real calendar day."""

    def __init__(self, message: str = "Invalid date", field: str = "date"):
        super().__init__(message=message, field=field)


class EmptyContentError(ValidationError):
    """Content is missing, empty, or whitespace only."""

    def __init__(self, message: str = "Content must not be empty", field: str = "content"):
        super().__init__(message=message, field=field)


class InvalidIdError(ValidationError):
    """Identifier is not an integer (fractional, NaN, None, wrong type)."""

    def __init__(self, message: str = "ID must be an integer", field: str = "id"):
        super().__init__(message=message, field=field)


class MissingKeywordError(ValidationError):
    """Search keyword was not supplied at all."""

    def __init__(self, message: str = "Search keyword is required", field: Optional[str] = "q"):
        super().__init__(message=message, field=field)


class NotFoundError(DiaryError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found

    The repository reports a miss as an absent value (None / False); routes
    convert that into this exception so the status mapping stays in one place.
    """

    def __init__(
        self,
        resource: str = "Entry",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(DiaryError):
    """
    Raised when a store operation fails unexpectedly.

    HTTP: 500 Internal Server Error

    The message returned to the client is always generic. The original driver
    error is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def status_code_for(error: Exception) -> int:
    """
    Map an error kind to its HTTP status code.

    ValidationError → 400, NotFoundError → 404, anything else → 500.
    """
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    return 500
