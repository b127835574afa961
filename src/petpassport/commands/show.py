"""Command: show a passport and its current holder."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.commands._base import PassportCommand

if TYPE_CHECKING:
    from petpassport.commands._context import AppContext


@click.command(
    cls=PassportCommand,
    examples="""\
  petpassport show 0xcbc471ca60092bbe6c631f02bc57399b2da3d1ae491a55a1aa960a4b2e0ac7e8
  petpassport show CBC471CA60092BBE6C631F02BC57399B2DA3D1AE491A55A1AA960A4B2E0AC7E8""",
)
@click.argument("passport_id")
@click.pass_obj
def show(app: AppContext, passport_id: str) -> None:
    """Show a passport's fields and holder."""
    app.emit(app.passports().get(passport_id))
