"""Root CLI group for petpassport with global flags and command registration."""

from __future__ import annotations

import click

from petpassport import __version__
from petpassport.commands import register_commands
from petpassport.commands._context import AppContext
from petpassport.config.settings import PassportSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="petpassport")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-s", "--sender", default=None, help="Address acting as the caller.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--sync", is_flag=True, help="Deliver events synchronously.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    sender: str | None,
    config_path: str | None,
    sync: bool,
) -> None:
    """petpassport — passports for rescued animals."""
    settings = PassportSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        sender=sender,
        sync=sync,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
