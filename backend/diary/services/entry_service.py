"""
Diary Backend — Entry Service (Business Layer)
================================================

What:  Stable seam between the HTTP layer and the persistence layer.
How:   Each method delegates 1:1 to EntryRepository and returns its result
       (or lets its exception propagate) unchanged.
Who:   Constructed once by the app factory with the repository it wraps.
"""

from typing import List, Optional

from diary.repositories.entry_repository import EntryRepository
from diary.result import Result
from diary.schemas.entry import EntryRecord
from diary.services.entry_base import EntryServiceBase


class EntryService(EntryServiceBase):
    """Pass-through implementation of EntryServiceBase."""

    def __init__(self, repository: EntryRepository):
        self._repository = repository

    async def create_entry(self, date: str, content: str) -> Result[EntryRecord]:
        return await self._repository.create(date, content)

    async def get_all_entries(self) -> List[EntryRecord]:
        return await self._repository.find_all()

    async def get_entry_by_id(self, entry_id: int) -> Result[Optional[EntryRecord]]:
        return await self._repository.find_by_id(entry_id)

    async def update_entry(
        self, entry_id: int, date: str, content: str
    ) -> Result[Optional[EntryRecord]]:
        return await self._repository.update(entry_id, date, content)

    async def delete_entry(self, entry_id: int) -> bool:
        return await self._repository.delete(entry_id)

    async def search_entries(self, keyword: Optional[str]) -> Result[List[EntryRecord]]:
        return await self._repository.search(keyword)
