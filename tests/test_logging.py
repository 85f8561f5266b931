# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for console output helpers."""

from __future__ import annotations

import pytest

from rombundle.logging import Level, fail, info, ok, section, warn


def test_messages_are_plain_without_emoji(capsys: pytest.CaptureFixture[str]) -> None:
    info("scanning", use_emoji=False)
    ok("done", use_emoji=False)
    warn("careful", use_emoji=False)
    fail("broken", use_emoji=False)

    assert capsys.readouterr().out.splitlines() == ["scanning", "done", "careful", "broken"]


def test_emoji_prefix_follows_level(capsys: pytest.CaptureFixture[str]) -> None:
    fail("broken", use_emoji=True)

    assert capsys.readouterr().out.startswith(Level.FAIL.prefix.strip())


def test_section_without_terminal_uses_plain_rule(capsys: pytest.CaptureFixture[str]) -> None:
    section("Bundle manifest")

    assert capsys.readouterr().out.strip() == "--- Bundle manifest ---"
