# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate ROM images beneath the dialect group roots."""

from __future__ import annotations

import os
from collections.abc import Collection, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .errors import DiscoveryError, ReadError
from .models import DialectGroup, RomEntry


def is_rom_name(name: str) -> bool:
    """Return whether ``name`` looks like a ROM payload (no extension at all).

    Args:
        name: File base name.

    Returns:
        bool: ``True`` when ``name`` contains no ``.`` character.
    """

    return "." not in name


def matches_exclusion(relative: PurePosixPath, patterns: Collection[str]) -> bool:
    """Return whether ``relative`` contains any exclusion substring, ignoring case.

    Args:
        relative: Path of the candidate relative to its group root.
        patterns: Lower-cased exclusion substrings.

    Returns:
        bool: ``True`` when the candidate should be skipped.
    """

    lowered = relative.as_posix().lower()
    return any(pattern in lowered for pattern in patterns)


@dataclass(frozen=True, slots=True)
class _Candidate:
    """A qualifying file found during the walk, prior to reading."""

    path: Path
    relative: PurePosixPath


class RomSource:
    """Discover and read ROM entries for every configured dialect group."""

    def __init__(
        self,
        roots: Mapping[DialectGroup, Path],
        *,
        exclude_patterns: Collection[str] = (),
    ) -> None:
        """Create a source bound to one root directory per dialect group.

        Args:
            roots: Mapping from dialect group to its classification root.
            exclude_patterns: Case-insensitive substrings skipped in the
                community examples group.
        """

        missing = [group.value for group in DialectGroup if group not in roots]
        if missing:
            raise ValueError(f"no root configured for: {', '.join(missing)}")
        self._roots = {group: roots[group] for group in DialectGroup}
        self._exclude_patterns = tuple(
            sorted({pattern.lower() for pattern in exclude_patterns if pattern})
        )

    @property
    def roots(self) -> dict[DialectGroup, Path]:
        """Return a copy of the group to root mapping."""

        return dict(self._roots)

    def discover(self, group: DialectGroup) -> tuple[RomEntry, ...]:
        """Return the ROM entries for ``group`` in relative path order.

        Args:
            group: Dialect group whose root should be scanned.

        Returns:
            tuple[RomEntry, ...]: Entries sorted lexicographically by path
            relative to the group root.

        Raises:
            DiscoveryError: If the root is missing or cannot be walked.
            ReadError: If a qualifying file cannot be read.
        """

        root = self._roots[group]
        if not root.exists():
            raise DiscoveryError(f"{group.value} root does not exist", path=root)
        if not root.is_dir():
            raise DiscoveryError(f"{group.value} root is not a directory", path=root)

        patterns = self._exclude_patterns if group.honours_excludes else ()
        candidates = sorted(self._walk(root, patterns), key=lambda item: item.relative.as_posix())
        return tuple(_read_entry(candidate, group) for candidate in candidates)

    def discover_all(self) -> dict[DialectGroup, tuple[RomEntry, ...]]:
        """Return entries for every dialect group in group order.

        Returns:
            dict[DialectGroup, tuple[RomEntry, ...]]: Entries keyed by group,
            inserted in :class:`DialectGroup` declaration order.
        """

        return {group: self.discover(group) for group in DialectGroup}

    def _walk(self, root: Path, patterns: Collection[str]) -> Iterator[_Candidate]:
        """Yield qualifying regular files beneath ``root``.

        Args:
            root: Group root directory.
            patterns: Exclusion substrings applicable to this group.

        Yields:
            _Candidate: Files whose base name has no extension and whose
            relative path matches no exclusion substring.
        """

        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            current = Path(dirpath)
            for filename in filenames:
                if not is_rom_name(filename):
                    continue
                candidate = current / filename
                if candidate.is_symlink() or not candidate.is_file():
                    continue
                relative = PurePosixPath(candidate.relative_to(root).as_posix())
                if patterns and matches_exclusion(relative, patterns):
                    continue
                yield _Candidate(path=candidate, relative=relative)


def _raise_walk_error(error: OSError) -> None:
    """Turn a directory listing failure into a :class:`DiscoveryError`."""

    raise DiscoveryError(f"cannot read directory ({error.strerror or error})", path=error.filename) from error


def _read_entry(candidate: _Candidate, group: DialectGroup) -> RomEntry:
    """Read the bytes behind ``candidate`` and wrap them in a :class:`RomEntry`."""

    try:
        data = candidate.path.read_bytes()
    except OSError as exc:
        raise ReadError(f"cannot read ROM ({exc.strerror or exc})", path=candidate.path) from exc
    return RomEntry(
        source_path=candidate.path,
        relative_path=candidate.relative,
        display_name=candidate.path.name,
        group=group,
        raw_bytes=data,
    )


__all__ = [
    "RomSource",
    "is_rom_name",
    "matches_exclusion",
]
