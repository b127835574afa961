"""Tests for identity and address formats."""

import pytest

from petpassport.domain.ids import (
    ADDRESS_PATTERN,
    derive_identity,
    identity_to_address,
    is_valid_address,
    normalize_address,
)


class TestNormalizeAddress:
    def test_short_form_padded(self) -> None:
        assert normalize_address("0x1") == "0x" + "0" * 63 + "1"

    def test_prefix_optional_and_case_folded(self) -> None:
        assert normalize_address("ABC") == normalize_address("0xabc")

    def test_full_length_kept(self) -> None:
        full = "0x" + "f" * 64
        assert normalize_address(full) == full

    def test_surrounding_whitespace_ignored(self) -> None:
        assert normalize_address(" 0x2 ") == normalize_address("0x2")

    @pytest.mark.parametrize("raw", ["", "0x", "0xzz", "0x" + "1" * 65, "hello"])
    def test_rejects_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError, match="Invalid address"):
            normalize_address(raw)


class TestDeriveIdentity:
    def test_canonical_format(self) -> None:
        assert ADDRESS_PATTERN.match(derive_identity("petpassport", 1))

    def test_deterministic(self) -> None:
        assert derive_identity("ns", 7) == derive_identity("ns", 7)

    def test_distinct_sequences(self) -> None:
        ids = {derive_identity("ns", n) for n in range(1, 500)}
        assert len(ids) == 499

    def test_namespace_separates(self) -> None:
        assert derive_identity("a", 1) != derive_identity("b", 1)


class TestIdentityToAddress:
    def test_roundtrip(self) -> None:
        identity = derive_identity("ns", 1)
        assert identity_to_address(identity) == identity
        assert is_valid_address(identity)

    def test_rejects_malformed(self) -> None:
        with pytest.raises(ValueError, match="Invalid identity"):
            identity_to_address("passport-1")
