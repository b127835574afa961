"""PassportService — issue, transfer, rename, verify, and look up passports.

Each mutating operation follows the same shape:

    RESOLVE caller → LOAD inside a transaction → APPLY the domain
    operation against the registry ports → COMMIT → FLUSH events

Events raised by the domain are buffered in :class:`PendingEvents` and
reach the event bus only after the transaction commits.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

from petpassport.domain import passport as core
from petpassport.domain.errors import PassportError
from petpassport.domain.ids import normalize_address
from petpassport.services.base import BaseService, PendingEvents
from petpassport.services.result import ServiceResult

if TYPE_CHECKING:
    from petpassport.domain.passport import Passport
    from petpassport.domain.ports import CallerContext
    from petpassport.infrastructure.registry import Registry

log = structlog.get_logger(__name__)


def _passport_data(passport: Passport, holder: str | None) -> dict[str, Any]:
    name, kind, rescue_date, issued_by = passport.info()
    return {
        "id": passport.identity,
        "animal_name": name,
        "animal_type": kind,
        "rescue_date": rescue_date,
        "issued_by": issued_by,
        "holder": holder,
        "valid": core.verify(passport),
    }


def _canonical_id(op: str, passport_id: str) -> tuple[str, ServiceResult | None]:
    """Normalize *passport_id* like an address; the second item is set on failure."""
    try:
        return normalize_address(passport_id), None
    except ValueError as exc:
        return passport_id, ServiceResult.failure(op, "INVALID_ADDRESS", str(exc), id=passport_id)


class PassportService(BaseService):
    """Passport lifecycle operations on behalf of one caller.

    *caller* may be omitted for read-only use; mutating operations then
    fail with ``NO_CALLER``.
    """

    def __init__(self, registry: Registry, caller: CallerContext | None = None) -> None:
        super().__init__(registry)
        self._caller = caller

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def issue_and_assign(
        self,
        animal_name: bytes | str,
        animal_type: bytes | str,
        rescue_date: int,
    ) -> ServiceResult:
        """Issue a passport and place it with the caller."""
        op = "issue"
        if self._caller is None:
            return self._no_caller(op)

        warnings: list[str] = []
        pending = PendingEvents()
        with self._registry.transaction() as txn:
            passport = core.issue_and_assign(
                animal_name,
                animal_type,
                rescue_date,
                ctx=self._caller,
                allocator=txn,
                holding=txn,
                sink=pending,
            )

        self._flush_events(pending, warnings)
        log.debug("passport.issue", passport_id=passport.identity, issued_by=passport.issued_by)
        return ServiceResult(
            ok=True,
            op=op,
            data=_passport_data(passport, self._caller.current_caller()),
            warnings=warnings,
        )

    def transfer(self, passport_id: str, recipient: str) -> ServiceResult:
        """Hand a passport the caller holds to *recipient*."""
        op = "transfer"
        if self._caller is None:
            return self._no_caller(op)

        passport_id, rejected = _canonical_id(op, passport_id)
        if rejected is not None:
            return rejected

        try:
            to_address = normalize_address(recipient)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_ADDRESS", str(exc), recipient=recipient)

        caller = self._caller.current_caller()
        warnings: list[str] = []
        pending = PendingEvents()
        with self._registry.transaction() as txn:
            passport = txn.take(caller, passport_id)
            if passport is None:
                if txn.holder_of(passport_id) is None:
                    return self._not_found(op, passport_id)
                return ServiceResult.failure(
                    op,
                    "NOT_HELD",
                    f"{caller} does not hold passport {passport_id}",
                    id=passport_id,
                )
            core.transfer(passport, to_address, ctx=self._caller, holding=txn, sink=pending)

        self._flush_events(pending, warnings)
        log.debug("passport.transfer", passport_id=passport_id, sender=caller, recipient=to_address)
        return ServiceResult(
            ok=True,
            op=op,
            data={**_passport_data(passport, to_address), "previous_holder": caller},
            warnings=warnings,
        )

    def update_animal_name(self, passport_id: str, new_name: bytes | str) -> ServiceResult:
        """Rename the animal. Only the passport's issuer may do this."""
        op = "update_animal_name"
        if self._caller is None:
            return self._no_caller(op)
        passport_id, rejected = _canonical_id(op, passport_id)
        if rejected is not None:
            return rejected

        warnings: list[str] = []
        pending = PendingEvents()
        with self._registry.transaction() as txn:
            found = txn.get(passport_id)
            if found is None:
                return self._not_found(op, passport_id)
            passport, holder = found
            old_name = passport.animal_name
            try:
                core.update_animal_name(passport, new_name, ctx=self._caller, sink=pending)
            except PassportError as exc:
                log.debug(
                    "passport.rename_denied",
                    passport_id=passport_id,
                    caller=self._caller.current_caller(),
                )
                return ServiceResult.failure(op, exc.code, str(exc), id=passport_id)
            txn.save_name(passport)

        self._flush_events(pending, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={**_passport_data(passport, holder), "old_name": old_name},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def verify(self, passport_id: str) -> ServiceResult:
        """Report whether a passport's fields are complete."""
        op = "verify"
        passport_id, rejected = _canonical_id(op, passport_id)
        if rejected is not None:
            return rejected
        found = self._registry.get(passport_id)
        if found is None:
            return self._not_found(op, passport_id)
        passport, _holder = found
        return ServiceResult(
            ok=True, op=op, data={"id": passport_id, "valid": core.verify(passport)}
        )

    def get(self, passport_id: str) -> ServiceResult:
        """Return a passport's fields and current holder."""
        op = "get"
        passport_id, rejected = _canonical_id(op, passport_id)
        if rejected is not None:
            return rejected
        found = self._registry.get(passport_id)
        if found is None:
            return self._not_found(op, passport_id)
        passport, holder = found
        return ServiceResult(ok=True, op=op, data=_passport_data(passport, holder))

    def list_held(self, holder: str | None = None) -> ServiceResult:
        """List passports, optionally only those held by *holder*."""
        op = "list"
        address: str | None = None
        if holder is not None:
            try:
                address = normalize_address(holder)
            except ValueError as exc:
                return ServiceResult.failure(op, "INVALID_ADDRESS", str(exc), holder=holder)

        items = [_passport_data(p, h) for p, h in self._registry.list_held(address)]
        return ServiceResult(
            ok=True,
            op=op,
            data={"holder": address, "items": items},
            meta={"count": len(items)},
        )

    def history(self, passport_id: str) -> ServiceResult:
        """Return a passport's events in the order they were emitted."""
        op = "history"
        passport_id, rejected = _canonical_id(op, passport_id)
        if rejected is not None:
            return rejected
        if self._registry.get(passport_id) is None:
            return self._not_found(op, passport_id)

        events = [
            {
                "seq": row.id,
                "event": row.hook_name,
                "status": row.status,
                "created": row.created,
                "payload": json.loads(row.payload),
            }
            for row in self._registry.history(passport_id)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": passport_id, "events": events},
            meta={"count": len(events)},
        )

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    @staticmethod
    def _not_found(op: str, passport_id: str) -> ServiceResult:
        return ServiceResult.failure(
            op, "NOT_FOUND", f"No passport found with ID: {passport_id}", id=passport_id
        )

    @staticmethod
    def _no_caller(op: str) -> ServiceResult:
        return ServiceResult.failure(
            op, "NO_CALLER", "No caller address configured (use --sender or [caller] address)"
        )
