"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, petpassport.toml only contains
overrides. A fresh registry needs no config file at all.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    name: str = "rescue-registry"
    # Seed for identity derivation. Changing it on a live registry starts
    # a new identity space.
    namespace: str = "petpassport"


class CallerConfig(BaseModel):
    """[caller] section."""

    model_config = {"frozen": True}

    address: str | None = None


class EventsConfig(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    sync: bool = False
    max_retries: int = Field(default=3, ge=1)
    max_workers: int = Field(default=2, ge=1)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    audit: dict[str, Any] = Field(default_factory=lambda: {"enabled": True})
