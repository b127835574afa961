"""SQLite database engine, schema, and sequence counters via SQLAlchemy Core."""

from petpassport.infrastructure.database.counters import next_sequence
from petpassport.infrastructure.database.engine import create_db_engine, init_database
from petpassport.infrastructure.database.schema import event_wal, id_counters, metadata, passports

__all__ = [
    "create_db_engine",
    "event_wal",
    "id_counters",
    "init_database",
    "metadata",
    "next_sequence",
    "passports",
]
