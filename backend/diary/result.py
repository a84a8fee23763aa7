"""
Diary Backend — Operation Results
===================================

What:  `Ok` / `Err` pair returned by the validators and by the repository
       operations that validate their input.
How:   Callers check `isinstance(result, Err)` (or `result.is_ok`) before
       touching `result.value`. `Err.error` is a ValidationError instance
       that the HTTP layer can raise to reach the global handlers.

Example:
    result = await repository.create("2026-01-29", "Entry 1")
    if isinstance(result, Err):
        raise result.error
    entry = result.value
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from diary.exceptions import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ValidationError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def unwrap(result: "Result[T]") -> T:
    """Return the Ok value or raise the carried ValidationError."""
    if isinstance(result, Err):
        raise result.error
    return result.value
