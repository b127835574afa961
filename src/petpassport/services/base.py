"""BaseService — abstract foundation for all petpassport services.

Every service receives a :class:`Registry` at construction time and owns
its transaction boundaries via ``self._registry.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from petpassport.domain.events import PassportEvent
    from petpassport.infrastructure.registry import Registry

logger = logging.getLogger(__name__)


class PendingEvents:
    """Event sink that buffers events until the transaction commits.

    An operation that fails part-way discards the buffer, so observers
    never hear about changes that did not happen.
    """

    def __init__(self) -> None:
        self.events: list[PassportEvent] = []

    def emit(self, event: PassportEvent) -> None:
        self.events.append(event)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class PassportService(BaseService):
            def transfer(self, passport_id: str, recipient: str) -> ServiceResult:
                with self._registry.transaction() as txn:
                    ...
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def _flush_events(self, pending: PendingEvents, warnings: list[str]) -> None:
        """Hand buffered events to the event bus. No-op if the bus is not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._registry.event_bus
        if bus is None:
            pending.events.clear()
            return
        for event in pending.events:
            try:
                bus.emit(event)
            except Exception:
                logger.debug("Event dispatch failed for %s", event.hook_name, exc_info=True)
                warnings.append(f"Event dispatch failed for {event.hook_name}")
        pending.events.clear()
