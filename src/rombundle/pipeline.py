# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Drive discovery, catalog rendering and bundle assembly in sequence."""

from __future__ import annotations

from dataclasses import dataclass

from .bundle import BundleAssembler, BundleResult
from .catalog import CatalogBuilder, encode_document
from .config import BundleConfig
from .discovery import RomSource
from .logging import info, ok
from .models import BundleManifest, Catalog, DialectGroup, RomEntry


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Artifacts produced by one pipeline run."""

    catalog: Catalog
    document: str
    manifest: BundleManifest
    bundle: BundleResult | None = None

    @property
    def dry_run(self) -> bool:
        """Return whether the run stopped before writing any output."""

        return self.bundle is None


def build_catalog(
    config: BundleConfig,
    *,
    use_emoji: bool = True,
    quiet: bool = False,
) -> tuple[Catalog, str]:
    """Discover ROMs and render the catalog document.

    Args:
        config: Resolved pipeline configuration.
        use_emoji: Whether progress messages may include emoji.
        quiet: Suppress progress messages entirely.

    Returns:
        tuple[Catalog, str]: Catalog value and its rendered HTML.

    Raises:
        DiscoveryError: If a classification root cannot be scanned.
        ReadError: If a ROM cannot be read.
        EncodingError: If a ROM cannot be encoded as a link token.
    """

    source = RomSource(config.group_roots(), exclude_patterns=config.exclude_patterns)
    entries: dict[DialectGroup, tuple[RomEntry, ...]] = {}
    for group, root in source.roots.items():
        if not quiet:
            info(f"Scanning {group.value} ROMs in {root}", use_emoji=use_emoji)
        entries[group] = source.discover(group)

    builder = CatalogBuilder(max_rom_bytes=config.max_rom_bytes)
    catalog = builder.build(entries)
    document = builder.render(catalog)
    if not quiet:
        info(f"Rendered {config.catalog_name} with {catalog.entry_count} ROMs", use_emoji=use_emoji)
    return catalog, document


def render_catalog(config: BundleConfig, *, use_emoji: bool = True, quiet: bool = False) -> str:
    """Return only the rendered catalog HTML for ``config``."""

    _catalog, document = build_catalog(config, use_emoji=use_emoji, quiet=quiet)
    return document


def run_pipeline(config: BundleConfig, *, dry_run: bool = False, use_emoji: bool = True) -> PipelineResult:
    """Run every stage, stopping at the first failure.

    Nothing is written until discovery, rendering and manifest planning have
    all succeeded; a dry run stops after planning.

    Args:
        config: Resolved pipeline configuration, read-only for the run.
        dry_run: When ``True`` report the manifest without writing output.
        use_emoji: Whether progress messages may include emoji.

    Returns:
        PipelineResult: Catalog, manifest and (unless dry run) bundle outcome.

    Raises:
        BundleError: Subclass identifying the failing stage.
    """

    catalog, document = build_catalog(config, use_emoji=use_emoji)

    assembler = BundleAssembler.from_config(config)
    manifest = assembler.plan(encode_document(document))
    info(f"Planned {len(manifest)} bundle files", use_emoji=use_emoji)
    if dry_run:
        return PipelineResult(catalog=catalog, document=document, manifest=manifest)

    result = assembler.assemble(manifest)
    ok(
        f"Wrote {len(result.files)} files to {result.output_dir} and archive {result.archive_path}",
        use_emoji=use_emoji,
    )
    return PipelineResult(catalog=catalog, document=document, manifest=manifest, bundle=result)


__all__ = [
    "PipelineResult",
    "build_catalog",
    "render_catalog",
    "run_pipeline",
]
