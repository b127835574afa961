"""Command: show the event history of a passport."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.commands._base import PassportCommand

if TYPE_CHECKING:
    from petpassport.commands._context import AppContext


@click.command(
    cls=PassportCommand,
    examples="""\
  petpassport history 0xcbc471ca60092bbe6c631f02bc57399b2da3d1ae491a55a1aa960a4b2e0ac7e8
  petpassport --json history 0xcbc471ca60092bbe6c631f02bc57399b2da3d1ae491a55a1aa960a4b2e0ac7e8""",
)
@click.argument("passport_id")
@click.pass_obj
def history(app: AppContext, passport_id: str) -> None:
    """List issue, rename and transfer events in the order they happened."""
    app.emit(app.passports().history(passport_id))
