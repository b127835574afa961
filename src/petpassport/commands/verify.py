"""Command: check that a passport's fields are complete."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.commands._base import PassportCommand

if TYPE_CHECKING:
    from petpassport.commands._context import AppContext


@click.command(
    cls=PassportCommand,
    examples="""\
  petpassport verify 0xcbc471ca60092bbe6c631f02bc57399b2da3d1ae491a55a1aa960a4b2e0ac7e8
  petpassport --json verify 0xcbc471ca60092bbe6c631f02bc57399b2da3d1ae491a55a1aa960a4b2e0ac7e8""",
)
@click.argument("passport_id")
@click.pass_obj
def verify(app: AppContext, passport_id: str) -> None:
    """Report whether name, type and rescue date are all set."""
    app.emit(app.passports().verify(passport_id))
