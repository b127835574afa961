"""Tests for the Passport record and its core operations.

The holding service here is an in-memory fake. Transfers are exercised
with a caller that already holds the passport: refusing non-holders is
the holding service's job, covered in the registry and service tests.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from petpassport.domain.errors import (
    InsufficientPermissionsError,
    InvalidPassportError,
    PassportError,
)
from petpassport.domain.events import (
    AnimalNameUpdated,
    PassportEvent,
    PassportIssued,
    PassportTransferred,
)
from petpassport.domain.ids import derive_identity, normalize_address
from petpassport.domain.passport import (
    Passport,
    decode_text,
    issue,
    issue_and_assign,
    transfer,
    update_animal_name,
    verify,
)

X = normalize_address("0x1")
Y = normalize_address("0x2")
Z = normalize_address("0x3")


# ---------------------------------------------------------------------------
# Fakes for the collaborator ports
# ---------------------------------------------------------------------------


class FixedCaller:
    def __init__(self, address: str) -> None:
        self.address = address

    def current_caller(self) -> str:
        return self.address


class CountingAllocator:
    def __init__(self) -> None:
        self.calls = 0

    def allocate(self) -> str:
        self.calls += 1
        return derive_identity("test", self.calls)

    def identity_to_address(self, identity: str) -> str:
        return identity


class MemoryHolding:
    def __init__(self) -> None:
        self.holders: dict[str, str] = {}
        self.records: dict[str, Passport] = {}

    def place(self, passport: Passport, holder: str) -> None:
        self.holders[passport.identity] = holder
        self.records[passport.identity] = passport

    def reassign(self, passport: Passport, new_holder: str) -> None:
        self.holders[passport.identity] = new_holder

    def take(self, holder: str, passport_id: str) -> Passport | None:
        if self.holders.get(passport_id) != holder:
            return None
        return self.records[passport_id]


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[PassportEvent] = []

    def emit(self, event: PassportEvent) -> None:
        self.events.append(event)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def allocator() -> CountingAllocator:
    return CountingAllocator()


@pytest.fixture
def holding() -> MemoryHolding:
    return MemoryHolding()


def _issue_as(
    caller: str,
    allocator: CountingAllocator,
    sink: RecordingSink,
    name: bytes | str = b"Firulais",
    kind: bytes | str = b"Perro",
    rescue_date: int = 1640995200,
) -> Passport:
    return issue(name, kind, rescue_date, ctx=FixedCaller(caller), allocator=allocator, sink=sink)


# ---------------------------------------------------------------------------
# issue
# ---------------------------------------------------------------------------


class TestIssue:
    def test_fields_echoed_and_issuer_is_caller(
        self, allocator: CountingAllocator, sink: RecordingSink
    ) -> None:
        p = _issue_as(X, allocator, sink)
        assert p.animal_name == "Firulais"
        assert p.animal_type == "Perro"
        assert p.rescue_date == 1640995200
        assert p.issued_by == X

    def test_no_normalization(self, allocator: CountingAllocator, sink: RecordingSink) -> None:
        p = _issue_as(X, allocator, sink, name=b"  Firulais ", kind=b"PERRO\n")
        assert p.animal_name == "  Firulais "
        assert p.animal_type == "PERRO\n"

    def test_identity_from_allocator(
        self, allocator: CountingAllocator, sink: RecordingSink
    ) -> None:
        first = _issue_as(X, allocator, sink)
        second = _issue_as(X, allocator, sink)
        assert allocator.calls == 2
        assert first.identity == derive_identity("test", 1)
        assert first.identity != second.identity

    def test_emits_issued_event(self, allocator: CountingAllocator, sink: RecordingSink) -> None:
        p = _issue_as(X, allocator, sink)
        assert sink.events == [
            PassportIssued(
                passport_id=p.identity,
                animal_name="Firulais",
                animal_type="Perro",
                issued_by=X,
                rescue_date=1640995200,
            )
        ]

    def test_utf8_text(self, allocator: CountingAllocator, sink: RecordingSink) -> None:
        p = _issue_as(X, allocator, sink, name="Ñandú".encode(), kind="Pájaro".encode())
        assert p.animal_name == "Ñandú"
        assert p.animal_type == "Pájaro"

    def test_invalid_utf8_propagates(
        self, allocator: CountingAllocator, sink: RecordingSink
    ) -> None:
        with pytest.raises(UnicodeDecodeError):
            _issue_as(X, allocator, sink, name=b"\xff\xfe")
        assert sink.events == []

    def test_empty_fields_allowed_but_invalid(
        self, allocator: CountingAllocator, sink: RecordingSink
    ) -> None:
        p = _issue_as(X, allocator, sink, name=b"", kind=b"", rescue_date=0)
        assert verify(p) is False


class TestIssueAndAssign:
    def test_places_with_caller(
        self, allocator: CountingAllocator, holding: MemoryHolding, sink: RecordingSink
    ) -> None:
        p = issue_and_assign(
            b"Firulais",
            b"Perro",
            1640995200,
            ctx=FixedCaller(X),
            allocator=allocator,
            holding=holding,
            sink=sink,
        )
        assert holding.take(X, p.identity) is p
        assert verify(p) is True
        assert len(sink.events) == 1


# ---------------------------------------------------------------------------
# transfer
# ---------------------------------------------------------------------------


class TestTransfer:
    def test_moves_holder_only(
        self, allocator: CountingAllocator, holding: MemoryHolding, sink: RecordingSink
    ) -> None:
        p = _issue_as(X, allocator, sink)
        holding.place(p, X)
        before = p.model_dump()

        transfer(p, Y, ctx=FixedCaller(X), holding=holding, sink=sink)

        assert holding.take(Y, p.identity) is p
        assert holding.take(X, p.identity) is None
        assert p.model_dump() == before

    def test_emits_transfer_event(
        self, allocator: CountingAllocator, holding: MemoryHolding, sink: RecordingSink
    ) -> None:
        p = _issue_as(X, allocator, sink)
        holding.place(p, X)
        transfer(p, Y, ctx=FixedCaller(X), holding=holding, sink=sink)
        assert sink.events[-1] == PassportTransferred(passport_id=p.identity, sender=X, recipient=Y)

    def test_issuer_survives_transfer_chain(
        self, allocator: CountingAllocator, holding: MemoryHolding, sink: RecordingSink
    ) -> None:
        p = _issue_as(X, allocator, sink)
        holding.place(p, X)
        transfer(p, Y, ctx=FixedCaller(X), holding=holding, sink=sink)
        transfer(p, Z, ctx=FixedCaller(Y), holding=holding, sink=sink)
        assert p.issued_by == X
        assert holding.holders[p.identity] == Z


# ---------------------------------------------------------------------------
# update_animal_name
# ---------------------------------------------------------------------------


class TestUpdateAnimalName:
    def test_issuer_can_rename(self, allocator: CountingAllocator, sink: RecordingSink) -> None:
        p = _issue_as(X, allocator, sink)
        update_animal_name(p, b"Firulais Updated", ctx=FixedCaller(X), sink=sink)

        assert p.animal_name == "Firulais Updated"
        assert (p.animal_type, p.rescue_date, p.issued_by) == ("Perro", 1640995200, X)
        assert sink.events[-1] == AnimalNameUpdated(
            passport_id=p.identity,
            old_name="Firulais",
            new_name="Firulais Updated",
            updated_by=X,
        )

    def test_non_issuer_rejected(self, allocator: CountingAllocator, sink: RecordingSink) -> None:
        p = _issue_as(X, allocator, sink)
        before = p.model_dump()
        events_before = list(sink.events)

        with pytest.raises(InsufficientPermissionsError):
            update_animal_name(p, b"Hijacked", ctx=FixedCaller(Z), sink=sink)

        assert p.model_dump() == before
        assert sink.events == events_before

    def test_holder_who_is_not_issuer_rejected(
        self, allocator: CountingAllocator, holding: MemoryHolding, sink: RecordingSink
    ) -> None:
        p = _issue_as(X, allocator, sink)
        holding.place(p, X)
        transfer(p, Y, ctx=FixedCaller(X), holding=holding, sink=sink)
        with pytest.raises(InsufficientPermissionsError):
            update_animal_name(p, b"Mine now", ctx=FixedCaller(Y), sink=sink)

    def test_rename_many_times(self, allocator: CountingAllocator, sink: RecordingSink) -> None:
        p = _issue_as(X, allocator, sink)
        for name in (b"A", b"B", b"C"):
            update_animal_name(p, name, ctx=FixedCaller(X), sink=sink)
        assert p.animal_name == "C"
        assert [e.old_name for e in sink.events if isinstance(e, AnimalNameUpdated)] == [
            "Firulais",
            "A",
            "B",
        ]


# ---------------------------------------------------------------------------
# verify and accessors
# ---------------------------------------------------------------------------


def _record(name: str, kind: str, rescue_date: int) -> Passport:
    return Passport(
        identity=derive_identity("test", 99),
        animal_name=name,
        animal_type=kind,
        rescue_date=rescue_date,
        issued_by=X,
    )


class TestVerify:
    @pytest.mark.parametrize(
        ("name", "kind", "rescue_date", "expected"),
        [
            ("Firulais", "Perro", 1640995200, True),
            ("Firulais", "Perro", 1, True),
            ("", "Perro", 1640995200, False),
            ("Firulais", "", 1640995200, False),
            ("Firulais", "Perro", 0, False),
            ("Firulais", "Perro", -5, False),
            ("", "", 0, False),
        ],
    )
    def test_completeness(self, name: str, kind: str, rescue_date: int, expected: bool) -> None:
        assert verify(_record(name, kind, rescue_date)) is expected

    def test_idempotent(self) -> None:
        p = _record("Firulais", "Perro", 1640995200)
        assert {verify(p) for _ in range(5)} == {True}


class TestAccessors:
    def test_info_tuple(self) -> None:
        p = _record("Firulais", "Perro", 1640995200)
        assert p.info() == ("Firulais", "Perro", 1640995200, X)

    def test_address_is_identity(self) -> None:
        p = _record("Firulais", "Perro", 1640995200)
        assert p.address == p.identity

    @pytest.mark.parametrize("field", ["identity", "animal_type", "rescue_date", "issued_by"])
    def test_immutable_fields(self, field: str) -> None:
        p = _record("Firulais", "Perro", 1640995200)
        with pytest.raises(ValidationError):
            setattr(p, field, "changed")

    def test_name_is_mutable(self) -> None:
        p = _record("Firulais", "Perro", 1640995200)
        p.animal_name = "Rex"
        assert p.animal_name == "Rex"


class TestDecodeText:
    def test_str_passthrough(self) -> None:
        assert decode_text("abc") == "abc"

    def test_bytes_decoded(self) -> None:
        assert decode_text("ü".encode()) == "ü"


class TestErrorTaxonomy:
    def test_codes_are_distinct(self) -> None:
        assert InsufficientPermissionsError.code != InvalidPassportError.code

    def test_common_base(self) -> None:
        assert issubclass(InsufficientPermissionsError, PassportError)
        assert issubclass(InvalidPassportError, PassportError)
