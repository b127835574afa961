"""Identity and address formats.

Passport identities and account addresses share one canonical form:
``0x`` followed by 64 lowercase hex digits.

- Identities are derived: SHA-256 of ``"{namespace}:{sequence}"``, where the
  sequence comes from an atomic counter that is never reused.
- Addresses typed by users are normalized (prefix optional, any case,
  short forms left-padded with zeros).

INVARIANT: Identities are permanent. Once allocated, an identity never changes.
"""

from __future__ import annotations

import hashlib
import re

ADDRESS_HEX_LENGTH = 64

ADDRESS_PATTERN: re.Pattern[str] = re.compile(r"^0x[0-9a-f]{64}$")

_LOOSE_PATTERN: re.Pattern[str] = re.compile(r"^(?:0[xX])?([0-9a-fA-F]{1,64})$")


def normalize_address(raw: str) -> str:
    """Normalize a user-supplied address to canonical ``0x`` + 64 hex form.

    Examples:
        >>> normalize_address("0x1")[-4:]
        '0001'
        >>> len(normalize_address("ABCDEF"))
        66

    Raises:
        ValueError: If *raw* is not a hex address of at most 64 digits.
    """
    match = _LOOSE_PATTERN.match(raw.strip())
    if match is None:
        msg = f"Invalid address: {raw!r}"
        raise ValueError(msg)
    digits = match.group(1).lower().rjust(ADDRESS_HEX_LENGTH, "0")
    return f"0x{digits}"


def is_valid_address(value: str) -> bool:
    """Check whether *value* is already in canonical address form."""
    return ADDRESS_PATTERN.match(value) is not None


def derive_identity(namespace: str, sequence: int) -> str:
    """Derive the identity for the *sequence*-th allocation in *namespace*.

    Distinct sequences yield distinct identities, so a counter that never
    repeats gives identities that are never recycled.
    """
    digest = hashlib.sha256(f"{namespace}:{sequence}".encode()).hexdigest()
    return f"0x{digest}"


def identity_to_address(identity: str) -> str:
    """Return the address form of a passport identity."""
    if not is_valid_address(identity):
        msg = f"Invalid identity: {identity!r}"
        raise ValueError(msg)
    return identity
