"""Contracts for the collaborators the passport core consumes.

The core never allocates identities, tracks holders, resolves the caller,
or delivers events itself. It talks to these four ports instead; the
registry, caller context, and event buffer in the outer layers implement
them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from petpassport.domain.events import PassportEvent
    from petpassport.domain.passport import Passport


class IdentityAllocator(Protocol):
    """Hands out identities that are never reused."""

    def allocate(self) -> str: ...

    def identity_to_address(self, identity: str) -> str: ...


class CallerContext(Protocol):
    """Supplies the acting principal for an operation."""

    def current_caller(self) -> str: ...


class HoldingService(Protocol):
    """Tracks which account currently holds each passport.

    Only the current holder can ``take`` a passport, which is what makes
    possession the authorization for consuming operations.
    """

    def place(self, passport: Passport, holder: str) -> None: ...

    def reassign(self, passport: Passport, new_holder: str) -> None: ...

    def take(self, holder: str, passport_id: str) -> Passport | None: ...


class EventSink(Protocol):
    """Accepts event records. Fire-and-forget."""

    def emit(self, event: PassportEvent) -> None: ...
