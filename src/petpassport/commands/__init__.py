"""Subcommand modules for petpassport.

Provides register_commands() which uses deferred imports to keep
``petpassport --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from petpassport.commands.history import history
    from petpassport.commands.issue import issue
    from petpassport.commands.list_cmd import list_cmd
    from petpassport.commands.rename import rename
    from petpassport.commands.show import show
    from petpassport.commands.transfer import transfer
    from petpassport.commands.verify import verify

    cli.add_command(issue)
    cli.add_command(transfer)
    cli.add_command(rename)
    cli.add_command(verify)
    cli.add_command(show)
    cli.add_command(list_cmd)
    cli.add_command(history)
