"""
Diary Backend — Migration Tests
=================================

What:  Runs the Alembic revision against a scratch SQLite database and
       checks it produces the same table the ORM model describes.
How:   Loads the revision module from alembic/versions and drives
       upgrade()/downgrade() through alembic.operations.Operations; also
       runs `alembic upgrade` through env.py online and offline.
"""

import importlib.util
import io
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import create_engine, inspect, text

from diary.config import settings

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"
VERSIONS_DIR = ALEMBIC_DIR / "versions"


def _load_revision(filename):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def connection():
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        yield conn
    engine.dispose()


def _run(connection, fn):
    context = MigrationContext.configure(connection)
    with Operations.context(context):
        fn()


class TestInitialRevision:

    def test_revision_is_root(self):
        revision = _load_revision("001_create_entries_table.py")

        assert revision.revision == "001"
        assert revision.down_revision is None

    def test_upgrade_creates_entries_table(self, connection):
        revision = _load_revision("001_create_entries_table.py")

        _run(connection, revision.upgrade)

        inspector = inspect(connection)
        columns = {c["name"]: c for c in inspector.get_columns("entries")}
        assert set(columns) == {"id", "date", "content", "created_at", "updated_at"}
        assert all(not c["nullable"] for name, c in columns.items() if name != "id")
        assert [ix["name"] for ix in inspector.get_indexes("entries")] == ["idx_entries_date"]

        ddl = connection.execute(
            text("SELECT sql FROM sqlite_master WHERE name = 'entries'")
        ).scalar_one()
        assert "AUTOINCREMENT" in ddl

    def test_downgrade_drops_table(self, connection):
        revision = _load_revision("001_create_entries_table.py")

        _run(connection, revision.upgrade)
        _run(connection, revision.downgrade)

        assert "entries" not in inspect(connection).get_table_names()


class TestMigrationEnvironment:

    @pytest.fixture
    def alembic_config(self):
        # No ini file: keeps alembic from reconfiguring the test run's logging
        config = Config()
        config.set_main_option("script_location", str(ALEMBIC_DIR))
        return config

    def test_upgrade_head_against_configured_url(self, alembic_config, tmp_path, monkeypatch):
        db_path = tmp_path / "migrated.db"
        monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_path}")

        command.upgrade(alembic_config, "head")

        engine = create_engine(f"sqlite:///{db_path}")
        try:
            with engine.connect() as conn:
                assert "entries" in inspect(conn).get_table_names()
                version = conn.execute(text("SELECT version_num FROM alembic_version")).scalar_one()
        finally:
            engine.dispose()
        assert version == "001"

    def test_offline_mode_emits_sql(self, alembic_config):
        buffer = io.StringIO()
        alembic_config.output_buffer = buffer

        command.upgrade(alembic_config, "head", sql=True)

        out = buffer.getvalue()
        assert "CREATE TABLE entries" in out
        assert "idx_entries_date" in out
