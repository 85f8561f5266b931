# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value objects shared by the discovery, catalog and bundle stages."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Final, Literal


class DialectGroup(str, Enum):
    """Enumerate ROM classification groups in catalog rendering order."""

    BASE_SET = "base_set"
    EXTENDED_SET = "extended_set"
    COMMUNITY_EXAMPLES = "community_examples"

    @property
    def separator(self) -> str | None:
        """Return the catalog label emitted before this group's entries.

        Returns:
            str | None: Plain-text separator, or ``None`` for the default group.
        """

        return _SEPARATORS[self]

    @property
    def honours_excludes(self) -> bool:
        """Return whether exclusion substrings apply to this group."""

        return self is DialectGroup.COMMUNITY_EXAMPLES


_SEPARATORS: Final[dict[DialectGroup, str | None]] = {
    DialectGroup.BASE_SET: None,
    DialectGroup.EXTENDED_SET: "SCHIP GAMES:",
    DialectGroup.COMMUNITY_EXAMPLES: (
        "OCTO GAMES, some may need to run significantly faster, press 9 then hold +:"
    ),
}


@dataclass(frozen=True, slots=True)
class RomEntry:
    """Describe one discovered ROM together with its raw bytes."""

    source_path: Path
    relative_path: PurePosixPath
    display_name: str
    group: DialectGroup
    raw_bytes: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class CatalogSection:
    """Ordered ROM entries belonging to a single dialect group."""

    group: DialectGroup
    entries: tuple[RomEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class Catalog:
    """Ordered catalog sections, one per dialect group."""

    sections: tuple[CatalogSection, ...]

    def __iter__(self) -> Iterator[CatalogSection]:
        return iter(self.sections)

    @property
    def entry_count(self) -> int:
        """Return the number of ROM entries across every section."""

        return sum(len(section) for section in self.sections)

    def section(self, group: DialectGroup) -> CatalogSection:
        """Return the section for ``group``.

        Args:
            group: Dialect group to look up.

        Returns:
            CatalogSection: Section holding the group's entries.

        Raises:
            KeyError: If the catalog carries no section for ``group``.
        """

        for candidate in self.sections:
            if candidate.group is group:
                return candidate
        raise KeyError(group)


ManifestOrigin = Literal["catalog", "static", "compiled"]


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """A single file destined for the bundle directory.

    Exactly one of ``source`` (copied verbatim) or ``content`` (written from
    memory) is populated.
    """

    destination: str
    origin: ManifestOrigin
    source: Path | None = None
    content: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if (self.source is None) == (self.content is None):
            raise ValueError("manifest entries need exactly one of source or content")

    def describe(self) -> str:
        """Return a short description used in collision reports."""

        if self.source is not None:
            return f"{self.origin} file {self.source}"
        return f"generated {self.origin}"


@dataclass(frozen=True, slots=True)
class BundleManifest:
    """Every file placed in the bundle, keyed by unique destination name."""

    entries: tuple[ManifestEntry, ...]

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def destinations(self) -> tuple[str, ...]:
        """Return destination names in manifest order."""

        return tuple(entry.destination for entry in self.entries)


__all__: Final = [
    "BundleManifest",
    "Catalog",
    "CatalogSection",
    "DialectGroup",
    "ManifestEntry",
    "ManifestOrigin",
    "RomEntry",
]
