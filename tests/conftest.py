"""Shared pytest fixtures for petpassport tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from petpassport.config.settings import PassportSettings
from petpassport.domain.ids import normalize_address
from petpassport.infrastructure.registry import Registry
from petpassport.services.caller import StaticCaller
from petpassport.services.passport import PassportService


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer config and env overrides out of tests."""
    for var in ("PETPASSPORT_CONFIG", "PETPASSPORT_SENDER", "PETPASSPORT_CALLER__ADDRESS"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry(tmp_path: Path) -> Iterator[Registry]:
    """Registry on a temp directory with a synchronous event bus."""
    settings = PassportSettings.from_cli(root=tmp_path)
    reg = Registry(settings)
    reg.init_event_bus(sync=True)
    try:
        yield reg
    finally:
        reg.close()


@pytest.fixture
def alice() -> str:
    return normalize_address("0xa11ce")


@pytest.fixture
def bob() -> str:
    return normalize_address("0xb0b")


@pytest.fixture
def carol() -> str:
    return normalize_address("0xca401")


@pytest.fixture
def service_for(registry: Registry):  # noqa: ANN201
    """Factory: a PassportService acting as the given address."""

    def _make(address: str) -> PassportService:
        return PassportService(registry, StaticCaller(address))

    return _make


@pytest.fixture
def _isolated_registry(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp dir so the CLI creates an isolated registry.

    Use via ``@pytest.mark.usefixtures("_isolated_registry")`` on command
    test classes.
    """
    monkeypatch.chdir(tmp_path)
