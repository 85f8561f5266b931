# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Link token encoding for ROM payloads carried in a URL fragment."""

from __future__ import annotations

import base64
import binascii
from typing import Final

from .errors import EncodingError

# Standard base64 output is a subset of the RFC 3986 fragment character set.
FRAGMENT_SAFE_CHARS: Final[frozenset[str]] = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/="
)


def encode_rom(data: bytes, *, max_bytes: int | None = None) -> str:
    """Return the single-line link token for ``data``.

    Args:
        data: Raw ROM bytes.
        max_bytes: Optional upper bound on the payload size.

    Returns:
        str: Padded standard base64 text without line breaks; empty for empty input.

    Raises:
        EncodingError: If ``data`` exceeds ``max_bytes``.
    """

    if max_bytes is not None and len(data) > max_bytes:
        raise EncodingError(f"ROM of {len(data)} bytes exceeds the {max_bytes} byte limit")
    return base64.b64encode(data).decode("ascii")


def decode_token(token: str) -> bytes:
    """Return the ROM bytes carried by ``token``.

    Args:
        token: Link token as produced by :func:`encode_rom`, without the ``#``.

    Returns:
        bytes: Decoded ROM payload.

    Raises:
        EncodingError: If ``token`` is not valid padded base64.
    """

    try:
        return base64.b64decode(token.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise EncodingError(f"malformed link token ({exc})") from exc


__all__ = ["FRAGMENT_SAFE_CHARS", "decode_token", "encode_rom"]
