# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared option declarations and option containers for the rombundle CLI."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root holding ROMs and configuration."),
]
BASE_SET_OPTION = Annotated[
    Path | None,
    typer.Option("--base-set", help="Root directory of base set ROMs."),
]
EXTENDED_SET_OPTION = Annotated[
    Path | None,
    typer.Option("--extended-set", help="Root directory of extended set ROMs."),
]
COMMUNITY_OPTION = Annotated[
    Path | None,
    typer.Option("--community", help="Root directory of community example ROMs."),
]
EXCLUDE_OPTION = Annotated[
    list[str] | None,
    typer.Option(
        "--exclude",
        "-x",
        help="Case-insensitive substring skipped in community examples (repeatable).",
    ),
]
OUTPUT_DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--output-dir", "-o", help="Bundle directory, replaced on every run."),
]
ARCHIVE_OPTION = Annotated[
    Path | None,
    typer.Option("--archive", help="Zip archive written from the bundle directory."),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Show the bundle manifest without writing anything."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Show configuration provenance."),
]
CATALOG_OUTPUT_OPTION = Annotated[
    str,
    typer.Option("--output", "-o", help="Catalog destination file, or '-' for stdout."),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...] | None:
    """Return sanitized CLI values preserving order, or ``None`` when absent."""

    if values is None:
        return None
    cleaned_values: list[str] = []
    for entry in values:
        stripped = entry.strip() if entry else ""
        if stripped:
            cleaned_values.append(stripped)
    return tuple(cleaned_values)


def _absolute(path: Path | None) -> Path | None:
    return path.expanduser().resolve() if path is not None else None


@dataclass(slots=True)
class SourceCLIOptions:
    """Capture ROM source overrides shared by every command."""

    root: Path
    base_set: Path | None
    extended_set: Path | None
    community: Path | None
    exclude: tuple[str, ...] | None

    def overrides(self) -> dict[str, Any]:
        """Return configuration overrides keyed by field name."""

        return {
            "base_set_root": _absolute(self.base_set),
            "extended_set_root": _absolute(self.extended_set),
            "community_root": _absolute(self.community),
            "exclude_patterns": self.exclude,
        }


@dataclass(slots=True)
class BuildCLIOptions:
    """Capture CLI overrides supplied to the build command."""

    sources: SourceCLIOptions
    output_dir: Path | None
    archive: Path | None
    dry_run: bool
    emoji: bool
    debug: bool

    @property
    def root(self) -> Path:
        return self.sources.root

    def overrides(self) -> dict[str, Any]:
        """Return configuration overrides keyed by field name."""

        values = self.sources.overrides()
        values["output_dir"] = _absolute(self.output_dir)
        values["archive_path"] = _absolute(self.archive)
        return values


def build_source_options(
    root: Path,
    base_set: Path | None,
    extended_set: Path | None,
    community: Path | None,
    exclude: Sequence[str] | None,
) -> SourceCLIOptions:
    """Construct ``SourceCLIOptions`` from Typer parameters."""

    return SourceCLIOptions(
        root=root.resolve(),
        base_set=base_set,
        extended_set=extended_set,
        community=community,
        exclude=normalize_cli_values(exclude),
    )


__all__ = [
    "ARCHIVE_OPTION",
    "BASE_SET_OPTION",
    "BuildCLIOptions",
    "CATALOG_OUTPUT_OPTION",
    "COMMUNITY_OPTION",
    "DEBUG_OPTION",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "EXCLUDE_OPTION",
    "EXTENDED_SET_OPTION",
    "OUTPUT_DIR_OPTION",
    "ROOT_OPTION",
    "SourceCLIOptions",
    "build_source_options",
    "normalize_cli_values",
]
