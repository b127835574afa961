"""Registry — SQLite-backed identity allocator and holding service.

The Registry is the single dependency injected into every service. It owns
the database engine and the (optional) plugin event bus. The
:meth:`Registry.transaction` context manager yields a
:class:`RegistryTransaction`, which implements the ``IdentityAllocator``
and ``HoldingService`` ports against one open DB transaction: the counter
bump, placement, reassignment and field writes of an operation commit
together or roll back together.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from petpassport.domain.ids import derive_identity
from petpassport.domain.ids import identity_to_address as _identity_to_address
from petpassport.domain.passport import Passport
from petpassport.infrastructure.database.counters import next_sequence
from petpassport.infrastructure.database.engine import DATA_DIRNAME, init_database
from petpassport.infrastructure.database.schema import event_wal, passports

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

    from petpassport.config.settings import PassportSettings
    from petpassport.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


def _row_to_passport(row: Row[Any]) -> Passport:
    return Passport(
        identity=row.id,
        animal_name=row.animal_name,
        animal_type=row.animal_type,
        rescue_date=row.rescue_date,
        issued_by=row.issued_by,
    )


# ---------------------------------------------------------------------------
# RegistryTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class RegistryTransaction:
    """Active transaction implementing the allocator and holding ports."""

    conn: Connection
    namespace: str
    timestamp: str

    # -- IdentityAllocator --------------------------------------------

    def allocate(self) -> str:
        """Claim the next identity in this registry's namespace."""
        return derive_identity(self.namespace, next_sequence(self.conn, self.namespace))

    def identity_to_address(self, identity: str) -> str:
        return _identity_to_address(identity)

    # -- HoldingService -----------------------------------------------

    def place(self, passport: Passport, holder: str) -> None:
        """Record a freshly issued passport as held by *holder*.

        Raises:
            ValueError: If the passport has already been placed.
        """
        if self.holder_of(passport.identity) is not None:
            msg = f"Passport already placed: {passport.identity}"
            raise ValueError(msg)
        self.conn.execute(
            insert(passports).values(
                id=passport.identity,
                animal_name=passport.animal_name,
                animal_type=passport.animal_type,
                rescue_date=passport.rescue_date,
                issued_by=passport.issued_by,
                holder=holder,
                created=self.timestamp,
                modified=self.timestamp,
            )
        )
        logger.debug("Placed %s with %s", passport.identity, holder)

    def reassign(self, passport: Passport, new_holder: str) -> None:
        """Move *passport* to *new_holder*, replacing the previous holder."""
        result = self.conn.execute(
            update(passports)
            .where(passports.c.id == passport.identity)
            .values(holder=new_holder, modified=self.timestamp)
        )
        if result.rowcount == 0:
            msg = f"Cannot reassign unplaced passport: {passport.identity}"
            raise ValueError(msg)
        logger.debug("Reassigned %s to %s", passport.identity, new_holder)

    def take(self, holder: str, passport_id: str) -> Passport | None:
        """Return the passport only if *holder* currently holds it."""
        row = self.conn.execute(
            select(passports).where(passports.c.id == passport_id, passports.c.holder == holder)
        ).first()
        return None if row is None else _row_to_passport(row)

    # -- Reads and field writes ---------------------------------------

    def get(self, passport_id: str) -> tuple[Passport, str] | None:
        """Load ``(passport, holder)`` regardless of holder, or None if unknown."""
        row = self.conn.execute(select(passports).where(passports.c.id == passport_id)).first()
        return None if row is None else (_row_to_passport(row), str(row.holder))

    def holder_of(self, passport_id: str) -> str | None:
        row = self.conn.execute(
            select(passports.c.holder).where(passports.c.id == passport_id)
        ).first()
        return None if row is None else str(row.holder)

    def save_name(self, passport: Passport) -> None:
        """Persist ``animal_name``, the only mutable field."""
        self.conn.execute(
            update(passports)
            .where(passports.c.id == passport.identity)
            .values(animal_name=passport.animal_name, modified=self.timestamp)
        )


# ---------------------------------------------------------------------------
# Registry — the repository
# ---------------------------------------------------------------------------


class Registry:
    """Repository encapsulating database access and event delivery.

    Constructed once at CLI startup from :class:`PassportSettings` and
    stored in ``click.Context.obj``. Services receive the Registry via
    their :class:`BaseService` constructor.
    """

    def __init__(self, settings: PassportSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._event_bus: EventBus | None = None

    @property
    def root(self) -> Path:
        """The registry root directory."""
        return self._settings.root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine."""
        return self._engine

    @property
    def settings(self) -> PassportSettings:
        return self._settings

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self, *, sync: bool = False) -> None:
        """Initialize the plugin event bus.

        Creates a PluginManager, discovers entry-point and local plugins,
        registers the built-in audit plugin when enabled, and wires up the
        EventBus.
        """
        from petpassport.plugins.builtins.audit import AuditPlugin
        from petpassport.plugins.event_bus import EventBus
        from petpassport.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load(local_dir=self.root / DATA_DIRNAME / "plugins")

        if self._settings.plugins.audit.get("enabled", True):
            pm.register_plugin(AuditPlugin(registry_name=self._settings.registry.name), "audit")

        events = self._settings.events
        self._event_bus = EventBus(
            self._engine,
            pm,
            sync=sync or events.sync,
            max_retries=events.max_retries,
            max_workers=events.max_workers,
        )

    @contextmanager
    def transaction(self) -> Iterator[RegistryTransaction]:
        """Open a DB transaction and yield the ports bound to it.

        Commits when the block exits normally, rolls back on any exception.

        Usage::

            with registry.transaction() as txn:
                passport = txn.take(caller, passport_id)
                ...
        """
        with self._engine.begin() as conn:
            yield RegistryTransaction(
                conn=conn,
                namespace=self._settings.registry.namespace,
                timestamp=datetime.now(UTC).isoformat(),
            )

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def get(self, passport_id: str) -> tuple[Passport, str] | None:
        """Return ``(passport, holder)`` or None if unknown."""
        with self._engine.connect() as conn:
            row = conn.execute(select(passports).where(passports.c.id == passport_id)).first()
        if row is None:
            return None
        return _row_to_passport(row), str(row.holder)

    def list_held(self, holder: str | None = None) -> list[tuple[Passport, str]]:
        """All passports, or only those held by *holder*, oldest first."""
        stmt = select(passports).order_by(passports.c.created, passports.c.id)
        if holder is not None:
            stmt = stmt.where(passports.c.holder == holder)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [(_row_to_passport(r), str(r.holder)) for r in rows]

    def history(self, passport_id: str) -> list[Row[Any]]:
        """Event log rows for one passport in emission order."""
        with self._engine.connect() as conn:
            return list(
                conn.execute(
                    select(event_wal)
                    .where(event_wal.c.passport_id == passport_id)
                    .order_by(event_wal.c.id)
                ).fetchall()
            )

    def close(self) -> None:
        """Retry undelivered events, shut down the event bus, dispose of the engine."""
        if self._event_bus is not None:
            self._event_bus.drain()
            self._event_bus.shutdown()
            self._event_bus = None
        self._engine.dispose()
