# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models, sources and layered loading for rombundle."""

from __future__ import annotations

from .loader import ConfigLoader, ConfigLoadResult, FieldUpdate, load_config
from .loaders import (
    CONFIG_FILENAME,
    ConfigSource,
    DefaultConfigSource,
    PyProjectConfigSource,
    TomlConfigSource,
)
from .models import DEFAULT_CATALOG_NAME, BundleConfig, ConfigError

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CATALOG_NAME",
    "BundleConfig",
    "ConfigError",
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "FieldUpdate",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_config",
]
