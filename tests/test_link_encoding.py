# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for ROM link token encoding."""

from __future__ import annotations

import base64

import pytest

from rombundle.encoding import FRAGMENT_SAFE_CHARS, decode_token, encode_rom
from rombundle.errors import EncodingError


@pytest.mark.parametrize("payload", [b"", b"\x00", b"\x00\xe0", b"\x12\x34\x56", bytes(range(256))])
def test_token_round_trips(payload: bytes) -> None:
    assert decode_token(encode_rom(payload)) == payload


def test_empty_rom_yields_empty_token() -> None:
    assert encode_rom(b"") == ""


def test_token_matches_standard_base64_without_line_breaks() -> None:
    payload = bytes(range(256)) * 16
    token = encode_rom(payload)

    assert token == base64.b64encode(payload).decode("ascii")
    assert "\n" not in token
    assert set(token) <= FRAGMENT_SAFE_CHARS


def test_size_limit_raises_encoding_error() -> None:
    encode_rom(b"\x00" * 4, max_bytes=4)
    with pytest.raises(EncodingError) as excinfo:
        encode_rom(b"\x00" * 5, max_bytes=4)
    assert excinfo.value.stage == "encode"


def test_malformed_token_is_rejected() -> None:
    with pytest.raises(EncodingError):
        decode_token("not base64!")
