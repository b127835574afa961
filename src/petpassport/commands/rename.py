"""Command: rename the animal on a passport (issuer only)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.commands._base import PassportCommand

if TYPE_CHECKING:
    from petpassport.commands._context import AppContext


@click.command(
    cls=PassportCommand,
    examples="""\
  petpassport --sender 0x696af9393f5178b31e6b2d12c7814868dbb35412f03989408c86c661be204e0c rename 0xcbc471ca60092bbe6c631f02bc57399b2da3d1ae491a55a1aa960a4b2e0ac7e8 "Firulais Updated" """,
)
@click.argument("passport_id")
@click.argument("new_name")
@click.pass_obj
def rename(app: AppContext, passport_id: str, new_name: str) -> None:
    """Change the animal name. Only the passport's issuer may do this."""
    app.emit(app.passports().update_animal_name(passport_id, new_name))
