"""WAL-backed delivery of passport events to plugins.

Every event is appended to ``event_wal`` before any plugin sees it. The
table doubles as each passport's event history, so per-passport order is
the order of WAL row ids. A delivery moves its row from ``pending`` to
``completed``, or to ``failed`` and eventually ``dead_letter``.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import json
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import insert, select, update

from petpassport.infrastructure.database.schema import event_wal
from petpassport.services._helpers import now_iso

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from petpassport.domain.events import PassportEvent
    from petpassport.plugins.manager import PluginManager

log = structlog.get_logger(__name__)

PENDING = "pending"
COMPLETED = "completed"
FAILED = "failed"
DEAD_LETTER = "dead_letter"
RETRYABLE = (PENDING, FAILED)


class EventBus:
    """Event sink that logs to the WAL and fans out to plugins.

    Parameters:
        engine: SQLAlchemy engine with the ``event_wal`` table.
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Deliver in the calling thread (tests / ``--sync``).
        max_retries: Failed attempts before an event is dead-lettered.
        max_workers: ThreadPoolExecutor worker count.
    """

    def __init__(
        self,
        engine: Engine,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_retries: int = 3,
        max_workers: int = 2,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._max_retries = max_retries
        self._executor = None if sync else ThreadPoolExecutor(max_workers=max_workers)
        self._in_flight: list[Future[str]] = []

    def emit(self, event: PassportEvent) -> int:
        """Append *event* to the WAL and deliver it. Returns the WAL row id."""
        payload = event.payload()
        with self._engine.begin() as conn:
            event_id: int = conn.execute(
                insert(event_wal).values(
                    hook_name=event.hook_name,
                    passport_id=event.passport_id,
                    payload=json.dumps(payload),
                    status=PENDING,
                    retries=0,
                    created=now_iso(),
                )
            ).inserted_primary_key[0]

        if self._executor is None:
            self._deliver(event_id, event.hook_name, payload)
        else:
            self._in_flight.append(
                self._executor.submit(self._deliver, event_id, event.hook_name, payload)
            )
        return event_id

    def drain(self) -> list[dict[str, Any]]:
        """Finish in-flight deliveries, then retry pending and failed events once.

        Returns ``{id, hook_name, status}`` for each retried event.
        """
        self._wait_in_flight()
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(event_wal.c.id, event_wal.c.hook_name, event_wal.c.payload)
                .where(event_wal.c.status.in_(RETRYABLE))
                .order_by(event_wal.c.id)
            ).fetchall()

        return [
            {
                "id": row.id,
                "hook_name": row.hook_name,
                "status": self._deliver(row.id, row.hook_name, json.loads(row.payload)),
            }
            for row in rows
        ]

    def shutdown(self) -> None:
        """Wait for in-flight deliveries and stop the worker pool."""
        self._wait_in_flight()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _deliver(self, event_id: int, hook_name: str, payload: dict[str, Any]) -> str:
        """Call the hook and record the outcome. Returns the new WAL status."""
        hook = getattr(self._pm.hook, hook_name, None)
        try:
            if hook is not None:
                hook(**payload)
        except Exception as exc:
            return self._record_failure(event_id, hook_name, str(exc))

        with self._engine.begin() as conn:
            conn.execute(
                update(event_wal)
                .where(event_wal.c.id == event_id)
                .values(status=COMPLETED, error=None, completed=now_iso())
            )
        return COMPLETED

    def _record_failure(self, event_id: int, hook_name: str, error: str) -> str:
        with self._engine.begin() as conn:
            retries = 1 + conn.execute(
                select(event_wal.c.retries).where(event_wal.c.id == event_id)
            ).scalar_one()
            status = DEAD_LETTER if retries >= self._max_retries else FAILED
            conn.execute(
                update(event_wal)
                .where(event_wal.c.id == event_id)
                .values(
                    status=status,
                    error=error,
                    retries=retries,
                    completed=now_iso() if status == DEAD_LETTER else None,
                )
            )

        if status == DEAD_LETTER:
            log.warning("event.dead_letter", event_id=event_id, hook=hook_name, error=error)
        else:
            log.debug("event.failed", event_id=event_id, hook=hook_name, retries=retries)
        return status

    def _wait_in_flight(self) -> None:
        for future in self._in_flight:
            try:
                future.result(timeout=30)
            except Exception:
                log.debug("event.delivery_error", exc_info=True)
        self._in_flight.clear()
