# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console output for pipeline progress and CLI results.

Every message goes through one of the level helpers below. Colour is used
only when stdout is a terminal; emoji prefixes follow the caller's flag.
"""

from __future__ import annotations

import sys
from enum import Enum
from functools import lru_cache

from rich.console import Console
from rich.rule import Rule
from rich.text import Text


class Level(Enum):
    """Message levels paired with their emoji prefix and rich style."""

    INFO = ("ℹ️ ", "cyan")
    OK = ("✅ ", "green")
    WARN = ("⚠️ ", "yellow")
    FAIL = ("❌ ", "red")

    @property
    def prefix(self) -> str:
        return self.value[0]

    @property
    def style(self) -> str:
        return self.value[1]


def stdout_is_tty() -> bool:
    """Return whether stdout is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def _console(*, color: bool, emoji: bool) -> Console:
    # The console resolves sys.stdout at print time, so captured streams work.
    return Console(
        color_system="auto" if color else None,
        force_terminal=color,
        no_color=not color,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def emit(level: Level, msg: str, *, use_emoji: bool) -> None:
    """Print ``msg`` at ``level``.

    Args:
        level: Message level selecting prefix and colour.
        msg: Message text.
        use_emoji: Whether to prepend the level's emoji.
    """

    color = stdout_is_tty()
    text = Text(f"{level.prefix if use_emoji else ''}{msg}")
    if color:
        text.stylize(level.style)
    _console(color=color, emoji=use_emoji).print(text)


def section(title: str) -> None:
    """Print a heading that separates blocks of output."""

    color = stdout_is_tty()
    console = _console(color=color, emoji=False)
    if color:
        console.print(Rule(title))
    else:
        console.print(f"--- {title} ---")


def info(msg: str, *, use_emoji: bool) -> None:
    emit(Level.INFO, msg, use_emoji=use_emoji)


def ok(msg: str, *, use_emoji: bool) -> None:
    emit(Level.OK, msg, use_emoji=use_emoji)


def warn(msg: str, *, use_emoji: bool) -> None:
    emit(Level.WARN, msg, use_emoji=use_emoji)


def fail(msg: str, *, use_emoji: bool) -> None:
    emit(Level.FAIL, msg, use_emoji=use_emoji)


__all__ = [
    "Level",
    "emit",
    "fail",
    "info",
    "ok",
    "section",
    "stdout_is_tty",
    "warn",
]
