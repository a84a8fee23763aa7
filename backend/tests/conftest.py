"""
Diary Backend — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches storage gets its own in-memory SQLite
       Database, so tests never share rows.

Fixture Hierarchy (all function-scoped):
    ├── database:          fresh in-memory Database with the schema created
    ├── repository:        EntryRepository over `database`
    ├── mock_repository:   AsyncMock standing in for EntryRepository
    ├── app:               FastAPI app wired to `database`
    └── test_client:       HTTPX AsyncClient talking to `app`
"""

import os
from unittest.mock import AsyncMock

# Must be set before any diary import: diary.main builds a module-level app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from diary.database import Database
from diary.main import create_app
from diary.repositories.entry_repository import EntryRepository

MEMORY_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def database():
    """
    Provides an isolated in-memory store with the entries table created.

    Disposed after the test, which discards all its data.
    """
    db = Database(MEMORY_URL)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def repository(database):
    return EntryRepository(database)


@pytest.fixture
def mock_repository():
    """
    Provides an AsyncMock with EntryRepository's async operations.

    Usage:
        mock_repository.find_all.return_value = [record]
        result = await EntryService(mock_repository).get_all_entries()
    """
    repo = AsyncMock(spec=EntryRepository)
    repo.create = AsyncMock()
    repo.find_all = AsyncMock()
    repo.find_by_id = AsyncMock()
    repo.update = AsyncMock()
    repo.delete = AsyncMock()
    repo.search = AsyncMock()
    return repo


@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Uses ASGITransport to route requests directly to the app. The lifespan
    is not run; the `database` fixture has already created the schema.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_entries():
    """The three entries from the ordering scenario, in creation order."""
    return [
        {"date": "2026-01-29", "content": "Entry 1"},
        {"date": "2026-01-31", "content": "Entry 3"},
        {"date": "2026-01-30", "content": "Entry 2"},
    ]
