"""The buoybot sqlite file: observations, tide predictions and the cycle log.

The schema lives in ``storage/migrations/v###_*.py`` modules, each exposing
``up(conn)``. Applied names are recorded in ``schema_versions`` so every
entry point can call ``run_migrations`` before touching the tables.
"""

import importlib
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

MIGRATIONS_PACKAGE = "buoybot.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open the buoy database in WAL mode, creating its directory on first use.

    WAL lets ``latest`` and ``tide`` read while a daemon cycle is writing.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Bring the schema up to date. Returns the migrations applied by this call."""
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()

    applied = {
        row["version"]
        for row in conn.execute("SELECT version FROM schema_versions")
    }
    pending = [name for name in _discover_migrations() if name not in applied]

    for name in pending:
        migration = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        migration.up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        conn.commit()

    return pending


@contextmanager
def open_database(db_path: str | Path) -> Iterator[sqlite3.Connection]:
    """Migrated connection for one command; closed on exit, even if setup fails."""
    conn = connect(db_path)
    try:
        run_migrations(conn)
        yield conn
    finally:
        conn.close()


def _discover_migrations() -> list[str]:
    return sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9]*_*.py"))
