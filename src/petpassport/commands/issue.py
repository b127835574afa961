"""Command: issue a passport and assign it to the sender."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.commands._base import PassportCommand

if TYPE_CHECKING:
    from petpassport.commands._context import AppContext


@click.command(
    cls=PassportCommand,
    examples="""\
  petpassport --sender 0x696af9393f5178b31e6b2d12c7814868dbb35412f03989408c86c661be204e0c issue Firulais Perro 1640995200
  petpassport --json --sender 0x696af9393f5178b31e6b2d12c7814868dbb35412f03989408c86c661be204e0c issue "Luna" "Gato" 1672531200""",
)
@click.argument("animal_name")
@click.argument("animal_type")
@click.argument("rescue_date", type=int)
@click.pass_obj
def issue(app: AppContext, animal_name: str, animal_type: str, rescue_date: int) -> None:
    """Issue a passport for a rescued animal; the sender becomes issuer and holder."""
    app.emit(app.passports().issue_and_assign(animal_name, animal_type, rescue_date))
