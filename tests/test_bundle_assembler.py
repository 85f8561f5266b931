# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for bundle manifest planning and assembly."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from rombundle.bundle import BundleAssembler, bundle_checksum, write_atomically
from rombundle.config import BundleConfig
from rombundle.errors import AssemblyError, CollisionError

CATALOG = b"<!DOCTYPE html>\n<ul></ul>\n"


def _assembler(tmp_path: Path, **kwargs) -> BundleAssembler:
    options = {
        "output_dir": tmp_path / "out" / "web",
        "archive_path": tmp_path / "out" / "web.zip",
        "catalog_name": "games.html",
    }
    options.update(kwargs)
    return BundleAssembler(**options)


def _write(path: Path, content: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def test_collision_between_static_and_compiled_inputs(tmp_path: Path) -> None:
    static_js = _write(tmp_path / "static" / "app.js", b"static")
    _write(tmp_path / "build" / "app.js", b"compiled")
    assembler = _assembler(
        tmp_path,
        static_assets=[static_js],
        compiled_artifacts=[(tmp_path / "build" / "*.js").as_posix()],
    )

    with pytest.raises(CollisionError) as excinfo:
        assembler.plan(CATALOG)

    assert excinfo.value.destination == "app.js"
    assert excinfo.value.stage == "assembly"
    assert not assembler.output_dir.exists()
    assert not assembler.archive_path.exists()


def test_static_catalog_copy_collides_with_generated_catalog(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    _write(static_dir / "games.html", b"stale")
    assembler = _assembler(tmp_path, static_dir=static_dir)

    with pytest.raises(CollisionError):
        assembler.plan(CATALOG)


def test_missing_static_asset_is_fatal(tmp_path: Path) -> None:
    assembler = _assembler(tmp_path, static_assets=[tmp_path / "missing.css"])

    with pytest.raises(AssemblyError) as excinfo:
        assembler.plan(CATALOG)
    assert excinfo.value.path == tmp_path / "missing.css"


def test_missing_static_directory_is_fatal(tmp_path: Path) -> None:
    assembler = _assembler(tmp_path, static_dir=tmp_path / "nowhere")

    with pytest.raises(AssemblyError):
        assembler.plan(CATALOG)


def test_nested_static_directory_is_rejected(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    _write(static_dir / "img" / "logo.png", b"png")
    assembler = _assembler(tmp_path, static_dir=static_dir)

    with pytest.raises(AssemblyError):
        assembler.plan(CATALOG)


def test_compiled_pattern_without_matches_is_fatal(tmp_path: Path) -> None:
    assembler = _assembler(tmp_path, compiled_artifacts=[(tmp_path / "release" / "oxi8.*").as_posix()])

    with pytest.raises(AssemblyError) as excinfo:
        assembler.plan(CATALOG)
    assert "matched no files" in excinfo.value.report()


def test_manifest_is_sorted_by_destination(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    _write(static_dir / "style.css", b"css")
    _write(static_dir / "index.html", b"html")
    _write(tmp_path / "release" / "oxi8.wasm", b"wasm")
    _write(tmp_path / "release" / "oxi8.js", b"js")
    assembler = _assembler(
        tmp_path,
        static_dir=static_dir,
        compiled_artifacts=[(tmp_path / "release" / "oxi8.*").as_posix()],
    )

    manifest = assembler.plan(CATALOG)

    assert manifest.destinations == ("games.html", "index.html", "oxi8.js", "oxi8.wasm", "style.css")
    assert [entry.origin for entry in manifest] == ["catalog", "static", "compiled", "compiled", "static"]


def test_assembled_directory_and_archive_match_manifest(config: BundleConfig) -> None:
    assembler = BundleAssembler.from_config(config)
    manifest = assembler.plan(CATALOG)

    result = assembler.assemble(manifest)

    on_disk = sorted(path.name for path in config.output_dir.iterdir())
    assert on_disk == sorted(manifest.destinations)
    assert result.file_names == tuple(on_disk)
    assert (config.output_dir / config.catalog_name).read_bytes() == CATALOG
    with zipfile.ZipFile(config.archive_path) as archive:
        assert sorted(archive.namelist()) == on_disk
        for name in on_disk:
            assert archive.read(name) == (config.output_dir / name).read_bytes()
    assert not assembler.partial_archive_path.exists()


def test_stale_output_is_replaced(config: BundleConfig) -> None:
    stale = _write(config.output_dir / "old-rom-set.html", b"stale")
    assembler = BundleAssembler.from_config(config)

    assembler.assemble(assembler.plan(CATALOG))

    assert not stale.exists()
    assert (config.output_dir / config.catalog_name).exists()


def test_repeated_assembly_is_byte_identical(config: BundleConfig) -> None:
    assembler = BundleAssembler.from_config(config)

    first = assembler.assemble(assembler.plan(CATALOG))
    first_archive = config.archive_path.read_bytes()
    second = assembler.assemble(assembler.plan(CATALOG))

    assert first.checksum == second.checksum
    assert config.archive_path.read_bytes() == first_archive


def test_failed_assembly_leaves_no_bundle(tmp_path: Path) -> None:
    asset = _write(tmp_path / "static" / "index.html", b"html")
    assembler = _assembler(tmp_path, static_assets=[asset])
    manifest = assembler.plan(CATALOG)
    asset.unlink()

    with pytest.raises(AssemblyError):
        assembler.assemble(manifest)

    assert not assembler.output_dir.exists()
    assert not assembler.archive_path.exists()
    assert not assembler.partial_archive_path.exists()


def test_output_dir_equal_to_static_dir_is_refused_before_deleting(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    _write(static_dir / "index.html", b"html")
    _write(static_dir / "style.css", b"css")
    assembler = _assembler(tmp_path, output_dir=static_dir, static_dir=static_dir)

    with pytest.raises(AssemblyError) as excinfo:
        assembler.plan(CATALOG)

    assert "overlaps output_dir" in excinfo.value.message
    assert sorted(path.name for path in static_dir.iterdir()) == ["index.html", "style.css"]


def test_compiled_match_inside_output_dir_is_refused(tmp_path: Path) -> None:
    output_dir = tmp_path / "out" / "web"
    _write(output_dir / "oxi8.wasm", b"wasm")
    assembler = _assembler(tmp_path, compiled_artifacts=[(output_dir / "oxi8.*").as_posix()])

    with pytest.raises(AssemblyError):
        assembler.plan(CATALOG)
    assert (output_dir / "oxi8.wasm").read_bytes() == b"wasm"


def test_static_asset_that_is_the_archive_is_refused(tmp_path: Path) -> None:
    archive = _write(tmp_path / "out" / "web.zip", b"zip")
    assembler = _assembler(tmp_path, static_assets=[archive])

    with pytest.raises(AssemblyError) as excinfo:
        assembler.plan(CATALOG)
    assert "archive path" in excinfo.value.message


def test_static_dotfiles_are_not_bundled(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    _write(static_dir / "index.html", b"html")
    _write(static_dir / ".gitignore", b"*\n")
    _write(static_dir / ".cache" / "entry", b"x")
    assembler = _assembler(tmp_path, static_dir=static_dir)

    assert assembler.plan(CATALOG).destinations == ("games.html", "index.html")


def test_checksum_covers_names_and_contents(tmp_path: Path) -> None:
    first = _write(tmp_path / "a" / "games.html", b"one")
    second = _write(tmp_path / "b" / "games.html", b"one")
    renamed = _write(tmp_path / "c" / "index.html", b"one")

    assert bundle_checksum(tmp_path / "a", [first]) == bundle_checksum(tmp_path / "b", [second])
    assert bundle_checksum(tmp_path / "a", [first]) != bundle_checksum(tmp_path / "c", [renamed])


def test_failed_atomic_write_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    destination = _write(tmp_path / "games.html", b"previous")

    def refuse(src: object, dst: object) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("rombundle.bundle.os.replace", refuse)

    with pytest.raises(AssemblyError) as excinfo:
        write_atomically(destination, b"new catalog")

    assert excinfo.value.path == destination
    assert destination.read_bytes() == b"previous"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["games.html"]
