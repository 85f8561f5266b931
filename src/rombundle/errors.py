# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised by the bundle pipeline stages."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Final


class BundleError(RuntimeError):
    """Base class for fatal pipeline failures tied to a stage and a path."""

    stage: ClassVar[str] = "pipeline"

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        """Initialise the error with a message and the offending path.

        Args:
            message: Human-readable description of the failure.
            path: Filesystem path (or token) that triggered the failure.
        """

        super().__init__(message)
        self.message = message
        self.path = Path(path) if isinstance(path, str) else path

    def report(self) -> str:
        """Return a single-line failure report naming the stage and path.

        Returns:
            str: Report suitable for showing to the user.
        """

        if self.path is None:
            return f"[{self.stage}] {self.message}"
        return f"[{self.stage}] {self.message}: {self.path}"


class DiscoveryError(BundleError):
    """Raised when a classification root is missing or cannot be walked."""

    stage = "discovery"


class ReadError(BundleError):
    """Raised when a qualifying ROM file cannot be read in full."""

    stage = "read"


class EncodingError(BundleError):
    """Raised when ROM bytes cannot be turned into a link token or back."""

    stage = "encode"


class AssemblyError(BundleError):
    """Raised when the bundle directory or archive cannot be produced."""

    stage = "assembly"


class CollisionError(AssemblyError):
    """Raised when two bundle inputs claim the same destination name."""

    def __init__(self, destination: str, first: str, second: str) -> None:
        """Initialise the error with the contested name and both claimants.

        Args:
            destination: File name claimed twice inside the bundle.
            first: Description of the input that claimed the name first.
            second: Description of the conflicting input.
        """

        super().__init__(
            f"destination {destination!r} claimed by both {first} and {second}",
            path=destination,
        )
        self.destination = destination
        self.first = first
        self.second = second


__all__: Final = [
    "AssemblyError",
    "BundleError",
    "CollisionError",
    "DiscoveryError",
    "EncodingError",
    "ReadError",
]
