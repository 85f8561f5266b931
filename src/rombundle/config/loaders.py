# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete configuration sources (defaults, TOML, pyproject)."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from .models import BundleConfig, ConfigError

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "rombundle"
CONFIG_FILENAME: Final[str] = ".rombundle.toml"


@runtime_checkable
class ConfigSource(Protocol):
    """Protocol implemented by configuration fragments."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment supplied by this source."""
        ...

    def describe(self) -> str:
        """Return a human-readable description of the source."""
        ...


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return BundleConfig().to_dict()

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        return _normalise_keys(self._read_document())

    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigError(f"Configuration at {self._path} must be a table")
        return dict(data)

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.rombundle]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = self._read_document()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return _normalise_keys(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


def _normalise_keys(fragment: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``fragment`` with dashed keys rewritten to field names."""

    return {str(key).replace("-", "_"): value for key, value in fragment.items()}


__all__ = [
    "CONFIG_FILENAME",
    "ConfigSource",
    "DefaultConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
]
