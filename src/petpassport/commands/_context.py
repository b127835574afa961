"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Registry initialization, the caller
context, and centralized result emission (stdout/stderr routing + exit
codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from petpassport.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from petpassport.config.settings import PassportSettings
    from petpassport.infrastructure.registry import Registry
    from petpassport.services.caller import StaticCaller
    from petpassport.services.passport import PassportService
    from petpassport.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry is created on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: PassportSettings) -> None:
        self.settings = settings
        self._registry: Registry | None = None

        from petpassport.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def registry(self) -> Registry:
        """The registry instance (created lazily on first access)."""
        if self._registry is None:
            from petpassport.infrastructure.registry import Registry

            self._registry = Registry(self.settings)
            self._registry.init_event_bus(sync=self.settings.sync)
        return self._registry

    @property
    def caller(self) -> StaticCaller | None:
        """The acting account, or None when no address is configured.

        Raises:
            click.BadParameter: If the configured address is malformed.
        """
        raw = self.settings.caller_address
        if raw is None:
            return None

        from petpassport.services.caller import StaticCaller

        try:
            return StaticCaller.from_raw(raw)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--sender") from exc

    def passports(self) -> PassportService:
        """A PassportService bound to the registry and the current caller."""
        from petpassport.services.passport import PassportService

        return PassportService(self.registry, self.caller)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr in human mode.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        """Flush event delivery and release the database."""
        if self._registry is not None:
            self._registry.close()
            self._registry = None
