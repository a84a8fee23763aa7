"""
Diary Backend — Database Handle & Lifespan Tests
==================================================

What:  Tests for Database (engine options, schema creation, sessions) and
       the application startup/shutdown sequence.
How:   In-memory SQLite for most tests; a tmp_path file database for the
       lifespan test so directory creation can be observed.
"""

import pytest
from sqlalchemy import inspect, select, text
from sqlalchemy.pool import StaticPool

from diary.config import Settings
from diary.database import Database, _engine_options, _is_memory_sqlite
from diary.main import create_app
from diary.models.entry import Entry


def _table_names(sync_conn):
    return inspect(sync_conn).get_table_names()


def _index_names(sync_conn):
    return [ix["name"] for ix in inspect(sync_conn).get_indexes("entries")]


class TestEngineOptions:

    @pytest.mark.parametrize("url", ["sqlite+aiosqlite://", "sqlite+aiosqlite:///:memory:"])
    def test_memory_urls_use_static_pool(self, url):
        assert _is_memory_sqlite(url)
        assert _engine_options(url, Settings())["poolclass"] is StaticPool

    def test_file_url_uses_default_pool(self):
        options = _engine_options("sqlite+aiosqlite:///./data/diary.db", Settings())

        assert not _is_memory_sqlite("sqlite+aiosqlite:///./data/diary.db")
        assert "poolclass" not in options
        assert "pool_size" not in options

    def test_server_url_gets_pool_sizing(self):
        config = Settings(db_pool_size=3, db_max_overflow=7)

        options = _engine_options("postgresql+asyncpg://u:p@localhost/diary", config)

        assert options["pool_size"] == 3
        assert options["max_overflow"] == 7
        assert options["pool_recycle"] == 3600


class TestSchema:

    @pytest.mark.asyncio
    async def test_create_schema_creates_table_and_index(self, database):
        async with database.engine.connect() as conn:
            assert "entries" in await conn.run_sync(_table_names)
            assert "idx_entries_date" in await conn.run_sync(_index_names)

    @pytest.mark.asyncio
    async def test_create_schema_is_idempotent(self, database, repository):
        created = (await repository.create("2026-01-29", "kept")).value

        await database.create_schema()

        assert await repository.find_all() == [created]

    @pytest.mark.asyncio
    async def test_ping(self, database):
        assert await database.ping() is True


class TestSession:

    @pytest.mark.asyncio
    async def test_commits_on_success(self, database):
        async with database.session() as session:
            session.add(Entry(
                date="2026-01-29",
                content="x",
                created_at="2026-01-29T08:00:00.000Z",
                updated_at="2026-01-29T08:00:00.000Z",
            ))

        async with database.session() as session:
            rows = (await session.execute(select(Entry))).scalars().all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, database):
        with pytest.raises(RuntimeError):
            async with database.session() as session:
                session.add(Entry(
                    date="2026-01-29",
                    content="x",
                    created_at="2026-01-29T08:00:00.000Z",
                    updated_at="2026-01-29T08:00:00.000Z",
                ))
                await session.flush()
                raise RuntimeError("boom")

        async with database.session() as session:
            count = (await session.execute(text("SELECT COUNT(*) FROM entries"))).scalar_one()
        assert count == 0


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_prepares_file_store(self, tmp_path):
        db_path = tmp_path / "nested" / "data" / "diary.db"
        config = Settings(database_url=f"sqlite+aiosqlite:///{db_path}", log_level="WARNING")
        database = Database(config=config)
        app = create_app(config=config, database=database)

        async with app.router.lifespan_context(app):
            assert db_path.parent.is_dir()
            async with database.engine.connect() as conn:
                assert "entries" in await conn.run_sync(_table_names)

        assert db_path.exists()

    @pytest.mark.asyncio
    async def test_data_survives_restart(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'diary.db'}"
        config = Settings(database_url=url, log_level="WARNING")

        first = Database(config=config)
        app = create_app(config=config, database=first)
        async with app.router.lifespan_context(app):
            await app.state.entry_service.create_entry("2026-01-29", "persisted")

        second = Database(config=config)
        app = create_app(config=config, database=second)
        async with app.router.lifespan_context(app):
            entries = await app.state.entry_service.get_all_entries()

        assert [e.content for e in entries] == ["persisted"]
