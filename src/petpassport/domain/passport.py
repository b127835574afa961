"""The Passport record and its lifecycle operations.

Lifecycle (holder tracked by the holding service, not on the record):

    issue ──► Unassigned ──place──► Held(caller) ──transfer──► Held(recipient)

Only :func:`update_animal_name` mutates a record after construction, and
only when the caller is the issuer. ``identity``, ``animal_type``,
``rescue_date`` and ``issued_by`` are frozen fields: assigning to them
raises a ``ValidationError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from petpassport.domain.errors import InsufficientPermissionsError
from petpassport.domain.events import AnimalNameUpdated, PassportIssued, PassportTransferred
from petpassport.domain.ids import identity_to_address

if TYPE_CHECKING:
    from petpassport.domain.ports import CallerContext, EventSink, HoldingService, IdentityAllocator


class Passport(BaseModel):
    """Certificate record for one rescued animal."""

    model_config = {"validate_assignment": True}

    identity: str = Field(frozen=True)
    animal_name: str
    animal_type: str = Field(frozen=True)
    rescue_date: int = Field(frozen=True)
    issued_by: str = Field(frozen=True)

    @property
    def address(self) -> str:
        """Address form of the identity."""
        return identity_to_address(self.identity)

    def info(self) -> tuple[str, str, int, str]:
        """Return ``(animal_name, animal_type, rescue_date, issued_by)``."""
        return self.animal_name, self.animal_type, self.rescue_date, self.issued_by


def decode_text(raw: bytes | str) -> str:
    """Decode UTF-8 bytes. ``UnicodeDecodeError`` propagates to the caller."""
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def issue(
    animal_name: bytes | str,
    animal_type: bytes | str,
    rescue_date: int,
    *,
    ctx: CallerContext,
    allocator: IdentityAllocator,
    sink: EventSink,
) -> Passport:
    """Construct a new, unassigned passport issued by the current caller.

    Fields are stored verbatim. Emits :class:`PassportIssued`.
    """
    name = decode_text(animal_name)
    kind = decode_text(animal_type)
    caller = ctx.current_caller()

    passport = Passport(
        identity=allocator.allocate(),
        animal_name=name,
        animal_type=kind,
        rescue_date=rescue_date,
        issued_by=caller,
    )
    sink.emit(
        PassportIssued(
            passport_id=passport.identity,
            animal_name=name,
            animal_type=kind,
            issued_by=caller,
            rescue_date=rescue_date,
        )
    )
    return passport


def issue_and_assign(
    animal_name: bytes | str,
    animal_type: bytes | str,
    rescue_date: int,
    *,
    ctx: CallerContext,
    allocator: IdentityAllocator,
    holding: HoldingService,
    sink: EventSink,
) -> Passport:
    """Issue a passport and place it with the caller.

    Returns the placed passport for the caller's convenience; the holding
    assignment is the operation's effect.
    """
    passport = issue(
        animal_name, animal_type, rescue_date, ctx=ctx, allocator=allocator, sink=sink
    )
    holding.place(passport, ctx.current_caller())
    return passport


def transfer(
    passport: Passport,
    recipient: str,
    *,
    ctx: CallerContext,
    holding: HoldingService,
    sink: EventSink,
) -> None:
    """Hand *passport* to *recipient*.

    The caller is not checked here: whoever could take the passport from
    the holding service holds it. Emits :class:`PassportTransferred`
    before the reassignment.
    """
    sink.emit(
        PassportTransferred(
            passport_id=passport.identity,
            sender=ctx.current_caller(),
            recipient=recipient,
        )
    )
    holding.reassign(passport, recipient)


def update_animal_name(
    passport: Passport,
    new_name: bytes | str,
    *,
    ctx: CallerContext,
    sink: EventSink,
) -> None:
    """Rename the animal. Only the issuer may do this.

    Raises:
        InsufficientPermissionsError: If the caller is not ``issued_by``.
            Nothing is written and no event is emitted.
    """
    caller = ctx.current_caller()
    if caller != passport.issued_by:
        msg = f"{caller} is not the issuer of passport {passport.identity}"
        raise InsufficientPermissionsError(msg)

    name = decode_text(new_name)
    old_name = passport.animal_name
    passport.animal_name = name
    sink.emit(
        AnimalNameUpdated(
            passport_id=passport.identity,
            old_name=old_name,
            new_name=name,
            updated_by=caller,
        )
    )


def verify(passport: Passport) -> bool:
    """Field-completeness check: both names non-empty and ``rescue_date > 0``.

    Not a cryptographic or ownership check.
    """
    return bool(passport.animal_name) and bool(passport.animal_type) and passport.rescue_date > 0
