"""
Alembic Migration Environment
===============================

What:  Runs the diary migrations offline (SQL to stdout) or online.
How:   The URL comes from diary.config.settings, never from alembic.ini.
       Online mode opens an async engine and hands its connection to
       Alembic through run_sync().
Who:   `alembic upgrade head` and friends, run from the backend/ directory.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from diary.config import settings
from diary.database import Base
from diary.models.entry import Entry  # noqa: F401  (registers the table)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _run(**configure_kwargs) -> None:
    # Batch mode: SQLite rebuilds tables instead of ALTERing constraints
    context.configure(
        target_metadata=Base.metadata,
        render_as_batch=True,
        **configure_kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


async def _run_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(lambda sync_conn: _run(connection=sync_conn))
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _run(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_online(settings.database_url))
