"""Command: hand a passport to another account."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.commands._base import PassportCommand

if TYPE_CHECKING:
    from petpassport.commands._context import AppContext


@click.command(
    cls=PassportCommand,
    examples="""\
  petpassport --sender 0x696af9393f5178b31e6b2d12c7814868dbb35412f03989408c86c661be204e0c transfer 0xcbc471ca60092bbe6c631f02bc57399b2da3d1ae491a55a1aa960a4b2e0ac7e8 0xf132df0fd8e1beab8c52f523d529e3e4f50b43f5fbe1e05ba53518ee5eb093d0""",
)
@click.argument("passport_id")
@click.argument("recipient")
@click.pass_obj
def transfer(app: AppContext, passport_id: str, recipient: str) -> None:
    """Transfer a passport the sender holds to RECIPIENT."""
    app.emit(app.passports().transfer(passport_id, recipient))
