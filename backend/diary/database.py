"""
Diary Backend — Database Engine & Session Management
======================================================

What:  The `Database` store handle: async SQLAlchemy engine, session factory,
       schema creation and teardown.
How:   One `Database` instance is constructed by the app factory (or by a
       test fixture) and handed to the repository. There is no module-level
       engine; every component reaches the store through the instance it was
       given.
Who:   Owned by the application lifespan; used by EntryRepository and the
       health check.
When:  Constructed at startup, `create_schema()` on startup, `dispose()` on
       shutdown.

Engine configuration:
    SQLite (default):
        File URLs use the driver's default pool. In-memory URLs use a
        StaticPool so every session shares the one connection that holds
        the data.
    Server databases (e.g. PostgreSQL via asyncpg):
        pool_size / max_overflow / pool_pre_ping come from Settings,
        pool_recycle=3600.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from diary.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object between `Database.create_schema()` and
    Alembic's autogenerate.
    """
    pass


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _engine_options(url: str, config: Settings) -> dict:
    """
    Build create_async_engine keyword arguments for the given URL.

    SQLite pools reject the queue-pool sizing arguments, so those are only
    passed for server databases.
    """
    options: dict = {"echo": config.db_echo}
    backend = make_url(url).get_backend_name()

    if backend == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            options["poolclass"] = StaticPool
        return options

    options.update(
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_pre_ping=config.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


class Database:
    """
    Explicitly constructed handle to the entries store.

    Attributes:
        url:     The SQLAlchemy URL this handle was built from
        engine:  The AsyncEngine owning the connection pool

    Usage:
        database = Database("sqlite+aiosqlite://")
        await database.create_schema()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: Optional[str] = None, config: Optional[Settings] = None):
        self._config = config or default_settings
        self.url = url or self._config.database_url
        self.engine: AsyncEngine = create_async_engine(
            self.url, **_engine_options(self.url, self._config)
        )
        # expire_on_commit=False: rows stay readable after the session commits
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def ensure_storage_directory(self) -> Optional[Path]:
        """
        Create the parent directory of a file-backed SQLite database.

        Returns the directory, or None for in-memory and server databases.
        """
        parsed = make_url(self.url)
        if parsed.get_backend_name() != "sqlite" or _is_memory_sqlite(self.url):
            return None
        directory = Path(parsed.database).expanduser().resolve().parent
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    async def create_schema(self) -> None:
        """
        Create every mapped table and index that does not exist yet.

        Equivalent to CREATE TABLE IF NOT EXISTS / CREATE INDEX IF NOT EXISTS;
        existing tables are never altered.
        """
        # Registers the entries table on Base.metadata
        from diary.models import entry  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready (%s)", make_url(self.url).render_as_string(hide_password=True))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a transactional session scope.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller
            3. On success: commits the transaction
            4. On error: rolls back and re-raises
            5. Always: closes the session (returns connection to pool)

        Each repository operation runs inside exactly one of these scopes, so
        a write either fully applies or leaves storage unchanged.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Run SELECT 1; True when the store answers."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def dispose(self) -> None:
        """
        Close all pooled connections.

        Called during application shutdown and at the end of each test.
        """
        await self.engine.dispose()
