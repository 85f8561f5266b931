# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Assemble the bundle directory and its zip archive."""

from __future__ import annotations

import glob
import hashlib
import os
import shutil
import zipfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .config import BundleConfig
from .errors import AssemblyError, CollisionError
from .models import BundleManifest, ManifestEntry

ZIP_TIMESTAMP: Final[tuple[int, int, int, int, int, int]] = (1980, 1, 1, 0, 0, 0)
ZIP_FILE_MODE: Final[int] = 0o644
PARTIAL_SUFFIX: Final[str] = ".partial"


@dataclass(frozen=True, slots=True)
class BundleResult:
    """Outcome of a successful assembly."""

    output_dir: Path
    archive_path: Path
    files: tuple[Path, ...]
    checksum: str

    @property
    def file_names(self) -> tuple[str, ...]:
        """Return the bundle file names in sorted order."""

        return tuple(path.name for path in self.files)


class BundleAssembler:
    """Plan and write the flat bundle directory plus its archive."""

    def __init__(
        self,
        *,
        output_dir: Path,
        archive_path: Path,
        catalog_name: str,
        static_dir: Path | None = None,
        static_assets: Sequence[Path] = (),
        compiled_artifacts: Sequence[str] = (),
    ) -> None:
        """Create an assembler for one output location.

        Args:
            output_dir: Directory replaced wholesale by every assembly.
            archive_path: Zip archive written from ``output_dir``.
            catalog_name: Destination name of the generated catalog.
            static_dir: Directory whose files are copied verbatim.
            static_assets: Individual files copied verbatim.
            compiled_artifacts: Glob patterns naming externally built files.
        """

        self.output_dir = output_dir
        self.archive_path = archive_path
        self.catalog_name = catalog_name
        self.static_dir = static_dir
        self.static_assets = tuple(static_assets)
        self.compiled_artifacts = tuple(compiled_artifacts)

    @classmethod
    def from_config(cls, config: BundleConfig) -> BundleAssembler:
        """Return an assembler wired from a resolved configuration."""

        return cls(
            output_dir=config.output_dir,
            archive_path=config.archive_path,
            catalog_name=config.catalog_name,
            static_dir=config.static_dir,
            static_assets=config.static_assets,
            compiled_artifacts=config.compiled_artifacts,
        )

    @property
    def partial_archive_path(self) -> Path:
        """Return the temporary path the archive is written to before renaming."""

        return self.archive_path.with_name(self.archive_path.name + PARTIAL_SUFFIX)

    def plan(self, catalog_document: bytes) -> BundleManifest:
        """Return the manifest of every bundle file without touching the output.

        Args:
            catalog_document: Encoded catalog written as ``catalog_name``.

        Returns:
            BundleManifest: Entries sorted by destination name.

        Raises:
            AssemblyError: If a required static or compiled input is missing,
                or an input overlaps the output directory or archive.
            CollisionError: If two inputs share a destination name.
        """

        if self.static_dir is not None:
            self._check_outside_output(self.static_dir)
        claimed: dict[str, ManifestEntry] = {}
        candidates = [ManifestEntry(destination=self.catalog_name, origin="catalog", content=catalog_document)]
        candidates.extend(self._static_entries())
        candidates.extend(self._compiled_entries())
        for entry in candidates:
            if entry.source is not None:
                self._check_outside_output(entry.source)
            previous = claimed.get(entry.destination)
            if previous is not None:
                raise CollisionError(entry.destination, previous.describe(), entry.describe())
            claimed[entry.destination] = entry
        return BundleManifest(entries=tuple(claimed[name] for name in sorted(claimed)))

    def assemble(self, manifest: BundleManifest) -> BundleResult:
        """Replace the output directory with ``manifest`` and archive it.

        Args:
            manifest: Manifest returned by :meth:`plan`.

        Returns:
            BundleResult: Written files, archive location and content checksum.

        Raises:
            AssemblyError: If previous output cannot be cleared or any file
                cannot be written. Partial output is removed first.
        """

        self._clear_previous()
        try:
            self.output_dir.mkdir(parents=True)
            written = tuple(self._write_entry(entry) for entry in manifest)
            self._write_archive(written)
            checksum = bundle_checksum(self.output_dir, written)
        except OSError as exc:
            self._discard_partial()
            raise AssemblyError(
                f"cannot write bundle ({exc.strerror or exc})",
                path=exc.filename or self.output_dir,
            ) from exc
        except BaseException:
            self._discard_partial()
            raise
        return BundleResult(
            output_dir=self.output_dir,
            archive_path=self.archive_path,
            files=tuple(sorted(written)),
            checksum=checksum,
        )

    def _static_entries(self) -> Iterable[ManifestEntry]:
        if self.static_dir is not None:
            if not self.static_dir.is_dir():
                raise AssemblyError("static asset directory is missing", path=self.static_dir)
            for child in sorted(self.static_dir.iterdir()):
                if child.name.startswith("."):
                    continue
                if not child.is_file():
                    raise AssemblyError("static asset directory must be flat", path=child)
                yield ManifestEntry(destination=child.name, origin="static", source=child)
        for asset in self.static_assets:
            if not asset.is_file():
                raise AssemblyError("static asset is missing", path=asset)
            yield ManifestEntry(destination=asset.name, origin="static", source=asset)

    def _compiled_entries(self) -> Iterable[ManifestEntry]:
        for pattern in self.compiled_artifacts:
            matches = sorted(Path(match) for match in glob.glob(pattern) if Path(match).is_file())
            if not matches:
                raise AssemblyError("compiled artifact pattern matched no files", path=pattern)
            for match in matches:
                yield ManifestEntry(destination=match.name, origin="compiled", source=match)

    def _check_outside_output(self, source: Path) -> None:
        """Refuse an input that assembly would delete or overwrite."""

        output = self.output_dir.resolve()
        resolved = source.resolve()
        if resolved == output or resolved.is_relative_to(output) or output.is_relative_to(resolved):
            raise AssemblyError("bundle input overlaps output_dir", path=source)
        if resolved == self.archive_path.resolve():
            raise AssemblyError("bundle input is the archive path", path=source)

    def _clear_previous(self) -> None:
        """Remove the archive and output directory left by an earlier run."""

        try:
            for archive in (self.archive_path, self.partial_archive_path):
                if archive.is_dir():
                    raise AssemblyError("archive path is a directory", path=archive)
                archive.unlink(missing_ok=True)
            if self.output_dir.is_dir() and not self.output_dir.is_symlink():
                shutil.rmtree(self.output_dir)
            elif self.output_dir.exists() or self.output_dir.is_symlink():
                self.output_dir.unlink()
        except OSError as exc:
            raise AssemblyError(
                f"cannot clear previous output ({exc.strerror or exc})",
                path=exc.filename or self.output_dir,
            ) from exc

    def _write_entry(self, entry: ManifestEntry) -> Path:
        destination = self.output_dir / entry.destination
        if entry.content is not None:
            destination.write_bytes(entry.content)
        elif entry.source is not None:
            shutil.copyfile(entry.source, destination)
        return destination

    def _write_archive(self, files: Sequence[Path]) -> None:
        """Write ``files`` into a zip next to the final path, then rename it."""

        partial = self.partial_archive_path
        partial.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(partial, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path in sorted(files, key=lambda item: item.name):
                info = zipfile.ZipInfo(path.relative_to(self.output_dir).as_posix(), date_time=ZIP_TIMESTAMP)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = ZIP_FILE_MODE << 16
                archive.writestr(info, path.read_bytes())
        os.replace(partial, self.archive_path)

    def _discard_partial(self) -> None:
        """Remove whatever the failed assembly left behind."""

        shutil.rmtree(self.output_dir, ignore_errors=True)
        self.partial_archive_path.unlink(missing_ok=True)
        self.archive_path.unlink(missing_ok=True)


def write_atomically(destination: Path, data: bytes) -> None:
    """Write ``data`` to a partial file beside ``destination`` and rename it.

    Args:
        destination: Final file path; left untouched when the write fails.
        data: File contents.

    Raises:
        AssemblyError: If the file cannot be written or renamed.
    """

    partial = destination.with_name(destination.name + PARTIAL_SUFFIX)
    try:
        partial.write_bytes(data)
        os.replace(partial, destination)
    except OSError as exc:
        partial.unlink(missing_ok=True)
        raise AssemblyError(f"cannot write file ({exc.strerror or exc})", path=destination) from exc


def bundle_checksum(output_dir: Path, files: Iterable[Path]) -> str:
    """Return a SHA-256 digest of the bundle names and contents.

    Files are hashed in order of their path relative to ``output_dir``, each
    as the relative name, a NUL byte, then the file bytes.
    """

    digest = hashlib.sha256()
    for relative in sorted(path.relative_to(output_dir).as_posix() for path in files):
        digest.update(relative.encode("utf-8"))
        digest.update(b"\0")
        digest.update((output_dir / relative).read_bytes())
    return digest.hexdigest()


__all__ = [
    "BundleAssembler",
    "BundleResult",
    "PARTIAL_SUFFIX",
    "ZIP_TIMESTAMP",
    "bundle_checksum",
    "write_atomically",
]
