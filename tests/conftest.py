# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from rombundle.config import BundleConfig, load_config

BASE_SET_DIR = Path("resources/CHIP8/GAMES")
EXTENDED_SET_DIR = Path("resources/CHIP8/SGAMES")
COMMUNITY_DIR = Path("resources/Octo/examples")
STATIC_DIR = Path("oxi8_quicksilver/static")
RELEASE_DIR = Path("target/wasm32-unknown-unknown/release")


def write_files(root: Path, files: Mapping[str, bytes]) -> None:
    """Create ``files`` (relative path to content) beneath ``root``."""

    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)


def make_project(
    root: Path,
    *,
    base: Mapping[str, bytes] | None = None,
    extended: Mapping[str, bytes] | None = None,
    community: Mapping[str, bytes] | None = None,
) -> Path:
    """Lay out a project tree matching the default configuration."""

    write_files(root / BASE_SET_DIR, base if base is not None else {"a": b"\x00\xe0", "b": b"\x12\x00"})
    write_files(root / EXTENDED_SET_DIR, extended if extended is not None else {"c": b"\x00\xff"})
    write_files(root / COMMUNITY_DIR, community if community is not None else {"d": b"\xa2\x1e\xd0\x15"})
    write_files(
        root / STATIC_DIR,
        {"index.html": b"<html>emulator</html>\n", "style.css": b"body { margin: 0; }\n"},
    )
    write_files(
        root / RELEASE_DIR,
        {"oxi8_quicksilver.js": b"// loader\n", "oxi8_quicksilver.wasm": b"\x00asm\x01\x00\x00\x00"},
    )
    return root


ProjectFactory = Callable[..., Path]


@pytest.fixture
def project_factory(tmp_path: Path) -> ProjectFactory:
    """Return a callable creating fresh project trees under ``tmp_path``."""

    counter = itertools.count()

    def factory(**groups: Mapping[str, bytes]) -> Path:
        return make_project(tmp_path / f"project-{next(counter)}", **groups)

    return factory


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a project tree with one or two ROMs per dialect group."""

    return make_project(tmp_path / "project")


@pytest.fixture
def config(project_root: Path) -> BundleConfig:
    """Return the default configuration resolved against ``project_root``."""

    return load_config(project_root)
