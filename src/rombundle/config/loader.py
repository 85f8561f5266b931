# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence and traceability."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .loaders import (
    CONFIG_FILENAME,
    ConfigSource,
    DefaultConfigSource,
    PyProjectConfigSource,
    TomlConfigSource,
)
from .models import BundleConfig, ConfigError

OVERRIDES_SOURCE = "cli"


class FieldUpdate(BaseModel):
    """Description of a single configuration field set by a source."""

    model_config = ConfigDict(frozen=True)

    field: str
    source: str
    value: Any


class ConfigLoadResult(BaseModel):
    """Container bundling a resolved config with provenance metadata."""

    model_config = ConfigDict(validate_assignment=True)

    config: BundleConfig
    updates: list[FieldUpdate] = Field(default_factory=list)


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, *, project_root: Path, sources: Sequence[ConfigSource]) -> None:
        """Initialise a loader that merges the supplied configuration sources.

        Args:
            project_root: Directory that anchors relative paths.
            sources: Ordered collection of configuration sources; later
                sources override earlier ones.
        """

        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)
        self._project_root = project_root.resolve()

    @classmethod
    def for_root(cls, project_root: Path) -> ConfigLoader:
        """Return a loader using defaults, ``pyproject.toml`` and ``.rombundle.toml``.

        Args:
            project_root: Project directory holding the configuration files.

        Returns:
            ConfigLoader: Loader configured with the standard source order.
        """

        return cls(
            project_root=project_root,
            sources=[
                DefaultConfigSource(),
                PyProjectConfigSource(project_root / "pyproject.toml"),
                TomlConfigSource(project_root / CONFIG_FILENAME),
            ],
        )

    def load(self, overrides: Mapping[str, Any] | None = None) -> ConfigLoadResult:
        """Merge every source plus ``overrides`` into a validated configuration.

        Args:
            overrides: Final layer of field values, typically from the CLI.
                ``None`` values are ignored.

        Returns:
            ConfigLoadResult: Resolved configuration and the fields each
            non-default layer set.

        Raises:
            ConfigError: If a source is unreadable or the merged values fail
                validation.
        """

        merged: dict[str, Any] = {}
        updates: list[FieldUpdate] = []
        for source in self._sources:
            fragment = source.load()
            merged.update(fragment)
            if not isinstance(source, DefaultConfigSource):
                updates.extend(FieldUpdate(field=key, source=source.name, value=value) for key, value in fragment.items())

        cli_values = {key: value for key, value in (overrides or {}).items() if value is not None}
        merged.update(cli_values)
        updates.extend(FieldUpdate(field=key, source=OVERRIDES_SOURCE, value=value) for key, value in cli_values.items())

        try:
            config = BundleConfig.model_validate(merged).resolved(self._project_root)
        except ValidationError as exc:
            raise ConfigError(_format_validation_error(exc)) from exc
        return ConfigLoadResult(config=config, updates=updates)


def load_config(project_root: Path, overrides: Mapping[str, Any] | None = None) -> BundleConfig:
    """Return the resolved configuration for ``project_root``.

    Args:
        project_root: Project directory holding the configuration files.
        overrides: Optional final layer of field values.

    Returns:
        BundleConfig: Configuration with absolute paths.
    """

    return ConfigLoader.for_root(project_root).load(overrides).config


def _format_validation_error(error: ValidationError) -> str:
    """Collapse pydantic errors into a single readable line."""

    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "config"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "Invalid configuration: " + "; ".join(parts)


__all__ = [
    "ConfigLoadResult",
    "ConfigLoader",
    "FieldUpdate",
    "load_config",
]
