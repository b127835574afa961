"""Pluggy hook specifications for passport lifecycle events.

One hook per event record in :mod:`petpassport.domain.events`; the hook
keyword arguments are the event fields.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("petpassport")


class PassportHookSpec:
    """Hook specifications for the petpassport plugin system."""

    @hookspec
    def post_issue(
        self,
        passport_id: str,
        animal_name: str,
        animal_type: str,
        issued_by: str,
        rescue_date: int,
    ) -> None:
        """Called after a passport is issued."""

    @hookspec
    def post_transfer(
        self,
        passport_id: str,
        sender: str,
        recipient: str,
    ) -> None:
        """Called after a passport changes holder."""

    @hookspec
    def post_rename(
        self,
        passport_id: str,
        old_name: str,
        new_name: str,
        updated_by: str,
    ) -> None:
        """Called after the issuer renames the animal."""
