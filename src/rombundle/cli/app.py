# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the build and catalog commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from ..bundle import write_atomically
from ..catalog import encode_document
from ..config import BundleConfig, ConfigError, ConfigLoader
from ..errors import BundleError
from ..pipeline import PipelineResult, build_catalog, run_pipeline
from ._cli_models import (
    ARCHIVE_OPTION,
    BASE_SET_OPTION,
    CATALOG_OUTPUT_OPTION,
    COMMUNITY_OPTION,
    DEBUG_OPTION,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    EXCLUDE_OPTION,
    EXTENDED_SET_OPTION,
    OUTPUT_DIR_OPTION,
    ROOT_OPTION,
    BuildCLIOptions,
    build_source_options,
)
from .shared import EXIT_CONFIG_ERROR, CLIError, CLILogger, build_cli_logger

app = typer.Typer(
    name="rombundle",
    help="Package ROM images into a static web bundle for the oxi8 front-end.",
    no_args_is_help=True,
    add_completion=False,
)


def _load_config(root: Path, overrides: dict[str, Any], *, logger: CLILogger) -> BundleConfig:
    """Return the resolved configuration or raise :class:`CLIError`.

    Args:
        root: Project root holding ``pyproject.toml`` or ``.rombundle.toml``.
        overrides: Field overrides collected from CLI options.
        logger: Logger receiving provenance debug lines.

    Returns:
        BundleConfig: Configuration with absolute paths.
    """

    try:
        result = ConfigLoader.for_root(root).load(overrides)
    except ConfigError as exc:
        raise CLIError(str(exc), exit_code=EXIT_CONFIG_ERROR) from exc
    for update in result.updates:
        logger.debug(f"config field={update.field} source={update.source} value={update.value!r}")
    return result.config


def _emit_build_summary(result: PipelineResult, *, logger: CLILogger) -> None:
    if result.bundle is None:
        logger.section("Bundle manifest")
        for entry in result.manifest:
            logger.warn(f"DRY RUN: would write {entry.destination} ({entry.origin})")
        return
    logger.echo(f"sha256 {result.bundle.checksum}")


@app.command("build")
def build_command(
    root: ROOT_OPTION = Path("."),
    base_set: BASE_SET_OPTION = None,
    extended_set: EXTENDED_SET_OPTION = None,
    community: COMMUNITY_OPTION = None,
    exclude: EXCLUDE_OPTION = None,
    output_dir: OUTPUT_DIR_OPTION = None,
    archive: ARCHIVE_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Regenerate the catalog, bundle directory and archive."""

    options = BuildCLIOptions(
        sources=build_source_options(root, base_set, extended_set, community, exclude),
        output_dir=output_dir,
        archive=archive,
        dry_run=dry_run,
        emoji=emoji,
        debug=debug,
    )
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        config = _load_config(options.root, options.overrides(), logger=logger)
        result = run_pipeline(config, dry_run=options.dry_run, use_emoji=options.emoji)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except BundleError as exc:
        logger.fail(exc.report())
        raise typer.Exit(code=1) from exc

    _emit_build_summary(result, logger=logger)


@app.command("catalog")
def catalog_command(
    root: ROOT_OPTION = Path("."),
    base_set: BASE_SET_OPTION = None,
    extended_set: EXTENDED_SET_OPTION = None,
    community: COMMUNITY_OPTION = None,
    exclude: EXCLUDE_OPTION = None,
    output: CATALOG_OUTPUT_OPTION = "-",
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Render only the HTML catalog, to a file or stdout."""

    sources = build_source_options(root, base_set, extended_set, community, exclude)
    logger = build_cli_logger(emoji=emoji, debug=debug)
    to_stdout = output == "-"
    try:
        config = _load_config(sources.root, sources.overrides(), logger=logger)
        _catalog, document = build_catalog(config, use_emoji=emoji, quiet=to_stdout)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except BundleError as exc:
        logger.fail(exc.report())
        raise typer.Exit(code=1) from exc

    if to_stdout:
        typer.echo(document, nl=False)
        return
    destination = Path(output).expanduser().resolve()
    try:
        write_atomically(destination, encode_document(document))
    except BundleError as exc:
        logger.fail(exc.report())
        raise typer.Exit(code=1) from exc
    logger.ok(f"Wrote {destination}")


def main() -> None:
    """Run the CLI application."""

    app(prog_name="rombundle")


__all__ = ["app", "main"]
