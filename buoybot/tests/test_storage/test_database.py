"""Tests for database connection, WAL mode, and migrations."""

import sqlite3
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from buoybot.storage.database import connect, open_database, run_migrations


class TestConnect:
    def test_wal_mode(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        mode = db.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode == "wal"
        db.close()

    def test_creates_parent_dir(self, tmp_path: Path):
        db = connect(tmp_path / "nested" / "dir" / "test.db")
        assert (tmp_path / "nested" / "dir").is_dir()
        db.close()

    def test_row_factory(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        db.execute("CREATE TABLE t (x TEXT)")
        db.execute("INSERT INTO t VALUES ('hello')")
        row = db.execute("SELECT x FROM t").fetchone()
        assert row["x"] == "hello"
        db.close()


class TestMigrations:
    def test_creates_all_tables(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied = run_migrations(db)
        assert "v001_initial" in applied

        tables = {
            row[0]
            for row in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        assert {
            "schema_versions",
            "observations",
            "tide_predictions",
            "cycles",
        }.issubset(tables)
        db.close()

    def test_idempotent(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied1 = run_migrations(db)
        applied2 = run_migrations(db)
        assert len(applied1) > 0
        assert applied2 == []
        db.close()


class TestOpenDatabase:
    def test_yields_migrated_connection(self, tmp_path: Path):
        with open_database(tmp_path / "test.db") as db:
            count = db.execute("SELECT COUNT(*) FROM observations").fetchone()[0]
        assert count == 0

    def test_closed_on_exit(self, tmp_path: Path):
        with open_database(tmp_path / "test.db") as db:
            pass
        with pytest.raises(sqlite3.ProgrammingError):
            db.execute("SELECT 1")

    def test_closed_when_migrations_fail(self, tmp_path: Path):
        conn = MagicMock()
        with patch("buoybot.storage.database.connect", return_value=conn), patch(
            "buoybot.storage.database.run_migrations",
            side_effect=sqlite3.OperationalError("database is locked"),
        ):
            with pytest.raises(sqlite3.OperationalError):
                with open_database(tmp_path / "test.db"):
                    pass
        conn.close.assert_called_once()
