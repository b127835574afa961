"""Caller context implementations.

The CLI acts on behalf of one account per invocation: the ``--sender``
flag, else ``PETPASSPORT_CALLER__ADDRESS``, else ``[caller] address`` in
``petpassport.toml``.
"""

from __future__ import annotations

from dataclasses import dataclass

from petpassport.domain.ids import normalize_address


@dataclass(frozen=True)
class StaticCaller:
    """A caller context that always answers with the same address."""

    address: str

    @classmethod
    def from_raw(cls, raw: str) -> StaticCaller:
        """Build from a user-supplied address.

        Raises:
            ValueError: If *raw* is not a valid address.
        """
        return cls(normalize_address(raw))

    def current_caller(self) -> str:
        return self.address
