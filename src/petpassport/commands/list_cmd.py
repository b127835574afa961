"""Command: list passports, optionally by holder."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.commands._base import PassportCommand

if TYPE_CHECKING:
    from petpassport.commands._context import AppContext


@click.command(
    "list",
    cls=PassportCommand,
    examples="""\
  petpassport list
  petpassport list --holder 696AF9393F5178B31E6B2D12C7814868DBB35412F03989408C86C661BE204E0C
  petpassport --sender 0x696af9393f5178b31e6b2d12c7814868dbb35412f03989408c86c661be204e0c list --mine""",
)
@click.option("--holder", default=None, help="Only passports held by this address.")
@click.option("--mine", is_flag=True, help="Only passports held by the sender.")
@click.pass_obj
def list_cmd(app: AppContext, holder: str | None, mine: bool) -> None:
    """List passports in the registry."""
    if mine:
        caller = app.caller
        if caller is None:
            raise click.UsageError("--mine requires --sender or [caller] address")
        holder = caller.current_caller()
    app.emit(app.passports().list_held(holder))
