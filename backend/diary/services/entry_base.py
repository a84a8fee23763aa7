"""
Diary Backend — Abstract Entry Service Interface
==================================================

What:  Abstract base class defining the business-layer contract for entries.
How:   EntryService implements it by delegating to EntryRepository. Routes
       depend on this interface only.
Who:   Resolved per request from app.state by the entries router.

Design Decision:
    Today every method is a pass-through. Rules that span entries (quotas,
    auditing, notifications) belong in an implementation of this interface,
    not in the routes and not in the repository.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from diary.result import Result
from diary.schemas.entry import EntryRecord


class EntryServiceBase(ABC):
    """
    Business-layer contract for diary entries.

    Return values and failures are the repository's, unchanged:
        - validated operations return Ok / Err
        - absent entries are Ok(None) / False
        - store failures raise DatabaseError
    """

    @abstractmethod
    async def create_entry(self, date: str, content: str) -> Result[EntryRecord]:
        """Create an entry; Err on invalid date or content."""
        ...

    @abstractmethod
    async def get_all_entries(self) -> List[EntryRecord]:
        """All entries ordered by date DESC, id DESC."""
        ...

    @abstractmethod
    async def get_entry_by_id(self, entry_id: int) -> Result[Optional[EntryRecord]]:
        ...

    @abstractmethod
    async def update_entry(
        self, entry_id: int, date: str, content: str
    ) -> Result[Optional[EntryRecord]]:
        ...

    @abstractmethod
    async def delete_entry(self, entry_id: int) -> bool:
        ...

    @abstractmethod
    async def search_entries(self, keyword: Optional[str]) -> Result[List[EntryRecord]]:
        """Case-insensitive literal substring search over content."""
        ...
