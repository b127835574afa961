"""Database engine setup for SQLite with WAL mode.

The registry DB is stored at {root}/.petpassport/registry.db.

SQLAlchemy Core (not ORM) is used because petpassport is a short-lived
CLI process — no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from petpassport.infrastructure.database.schema import metadata

DATA_DIRNAME = ".petpassport"
DB_FILENAME = "registry.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(root: Path) -> Engine:
    """Initialize the registry database under ``{root}/.petpassport/``.

    Creates the data directory (with a ``plugins/`` folder for local
    plugins) and all tables. Idempotent — safe to call on an existing
    registry.
    """
    data_dir = root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "plugins").mkdir(exist_ok=True)

    engine = create_db_engine(data_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
