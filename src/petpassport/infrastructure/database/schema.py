"""SQLAlchemy Core table definitions for the passport registry."""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

passports = Table(
    "passports",
    metadata,
    Column("id", Text, primary_key=True),
    Column("animal_name", Text, nullable=False),
    Column("animal_type", Text, nullable=False),
    Column("rescue_date", Integer, nullable=False),
    Column("issued_by", Text, nullable=False),
    Column("holder", Text, nullable=False),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index("ix_passports_holder", passports.c.holder)
Index("ix_passports_issued_by", passports.c.issued_by)

id_counters = Table(
    "id_counters",
    metadata,
    Column("namespace", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=1, server_default="1"),
)

event_wal = Table(
    "event_wal",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("passport_id", Text),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False),
    Column("error", Text),
    Column("retries", Integer, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("completed", Text),
)

Index("ix_event_wal_passport", event_wal.c.passport_id)
Index("ix_event_wal_status", event_wal.c.status)
