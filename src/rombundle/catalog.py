# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Render the grouped HTML ROM listing served alongside the emulator."""

from __future__ import annotations

import html
from collections.abc import Iterable, Mapping, Sequence
from typing import Final, TextIO

from .encoding import encode_rom
from .errors import EncodingError
from .models import Catalog, CatalogSection, DialectGroup, RomEntry

CATALOG_ENCODING: Final[str] = "utf-8"
LINK_PREFIX: Final[str] = "./#"
PROJECT_URL: Final[str] = "https://github.com/moparisthebest/oxi8"

PREAMBLE: Final[str] = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8" />
    <title>oxi8 rom listing</title>
    <meta http-equiv="X-UA-Compatible" content="IE=edge" />
    <meta content="width=device-width, initial-scale=1.0, maximum-scale=1.0, user-scalable=1" name="viewport" />
</head>
<body>
<pre>
chip8 had hexadecimal keyboard like on the right, here is the mapping:
1234  --->  123C
QWER  --->  456D
ASDF  --->  789E
ZXCV  --->  A0BF

Additional keys specific to oxi8:
Enter     ---> Reset game
Backspace ---> Back to game listing
Space     ---> Pause game
+/=       ---> Increase CPU Hz by 10
_/-       ---> Decrease CPU Hz by 10
0         ---> Set CPU Hz to Chip-8 default of 500hz
9         ---> Set CPU Hz to SChip default of 1000hz
</pre>
<a href="{PROJECT_URL}">oxi8 git repo here</a><br/>
Click a game to play in your browser:
<ul>
"""

POSTAMBLE: Final[str] = """</ul>
</body>
</html>
"""


class CatalogBuilder:
    """Build and render the ROM catalog document."""

    def __init__(self, *, max_rom_bytes: int | None = None) -> None:
        """Create a builder with an optional per-ROM size limit.

        Args:
            max_rom_bytes: Largest ROM accepted for link encoding, or ``None``.
        """

        self._max_rom_bytes = max_rom_bytes

    @staticmethod
    def build(entries_by_group: Mapping[DialectGroup, Sequence[RomEntry]]) -> Catalog:
        """Return a catalog with one section per dialect group in group order.

        Args:
            entries_by_group: Discovered entries keyed by group. Groups that
                are absent produce an empty section.

        Returns:
            Catalog: Immutable catalog value.
        """

        return Catalog(
            sections=tuple(
                CatalogSection(group=group, entries=tuple(entries_by_group.get(group, ())))
                for group in DialectGroup
            )
        )

    def render(self, catalog: Catalog) -> str:
        """Return the catalog as an HTML document.

        Args:
            catalog: Catalog produced by :meth:`build`.

        Returns:
            str: Complete HTML text; identical for identical input.

        Raises:
            EncodingError: If an entry cannot be encoded as a link token.
        """

        parts = [PREAMBLE]
        parts.extend(self._render_lines(catalog))
        parts.append(POSTAMBLE)
        return "".join(parts)

    def write(self, catalog: Catalog, stream: TextIO) -> None:
        """Write the rendered catalog to ``stream``.

        Args:
            catalog: Catalog produced by :meth:`build`.
            stream: Text stream receiving the document.
        """

        stream.write(self.render(catalog))

    def _render_lines(self, catalog: Catalog) -> Iterable[str]:
        for section in catalog:
            if section.group.separator is not None:
                yield f"<li>{html.escape(section.group.separator)}</li>\n"
            for entry in section.entries:
                yield self._render_entry(entry)

    def _render_entry(self, entry: RomEntry) -> str:
        try:
            token = encode_rom(entry.raw_bytes, max_bytes=self._max_rom_bytes)
        except EncodingError as exc:
            raise EncodingError(exc.message, path=entry.source_path) from exc
        label = html.escape(entry.display_name)
        return f'<li><a href="{LINK_PREFIX}{token}">{label}</a></li>\n'


def encode_document(document: str) -> bytes:
    """Return ``document`` as the bytes written into the bundle."""

    return document.encode(CATALOG_ENCODING)


__all__ = [
    "CATALOG_ENCODING",
    "CatalogBuilder",
    "LINK_PREFIX",
    "POSTAMBLE",
    "PREAMBLE",
    "PROJECT_URL",
    "encode_document",
]
