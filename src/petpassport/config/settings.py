"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PETPASSPORT_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``petpassport.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from petpassport.config.discovery import find_config
from petpassport.config.models import CallerConfig, EventsConfig, PluginsConfig, RegistryConfig

# TOML file read by the settings source while from_cli() builds an instance.
_toml_file: ContextVar[Path | None] = ContextVar("petpassport_toml_file", default=None)


class PassportSettings(BaseSettings):
    """Unified settings for the petpassport CLI.

    Attributes:
        root: Registry directory (parent of ``petpassport.toml``, or CWD
            if no config found). The database lives in ``root/.petpassport/``.
        config_path: The TOML file in effect, if any.
        sender: ``--sender`` override for the caller address.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PETPASSPORT_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = False
    sender: str | None = None

    # --- TOML sections ---
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    caller: CallerConfig = Field(default_factory=CallerConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def caller_address(self) -> str | None:
        """The raw caller address: ``--sender`` first, then ``[caller] address``."""
        return self.sender or self.caller.address

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=_toml_file.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> PassportSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* wins over walk-up discovery from *root*.
        Without *root*, the registry lives next to the config file (or in
        the CWD). ``None`` flags are dropped so they do not mask env vars.

        Raises:
            click.ClickException: If the config file is not valid TOML.
        """
        if config_path:
            toml_path: Path | None = Path(config_path) if Path(config_path).is_file() else None
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()
        flags = {k: v for k, v in cli_flags.items() if v is not None}

        token = _toml_file.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **flags)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _toml_file.reset(token)
