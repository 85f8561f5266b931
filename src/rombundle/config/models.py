# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model for the ROM bundle pipeline."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models import DialectGroup

DEFAULT_CATALOG_NAME: Final[str] = "games.html"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class BundleConfig(BaseModel):
    """Every option consumed by a single pipeline run.

    Paths may be relative; :meth:`resolved` anchors them to a project root.
    Instances are frozen so a run cannot mutate its own configuration.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_set_root: Path = Path("resources/CHIP8/GAMES")
    extended_set_root: Path = Path("resources/CHIP8/SGAMES")
    community_root: Path = Path("resources/Octo/examples")
    exclude_patterns: tuple[str, ...] = ("xo",)
    output_dir: Path = Path("target/oxi8_quicksilver_web")
    archive_path: Path = Path("target/oxi8_quicksilver.zip")
    catalog_name: str = DEFAULT_CATALOG_NAME
    static_dir: Path | None = Path("oxi8_quicksilver/static")
    static_assets: tuple[Path, ...] = ()
    compiled_artifacts: tuple[str, ...] = ("target/wasm32-unknown-unknown/release/oxi8_quicksilver.*",)
    max_rom_bytes: int | None = Field(default=None, gt=0)

    @field_validator("exclude_patterns", mode="before")
    @classmethod
    def _normalise_patterns(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        cleaned: list[str] = []
        for raw in value:
            token = str(raw).strip().lower()
            if token and token not in cleaned:
                cleaned.append(token)
        return tuple(cleaned)

    @field_validator("static_dir", mode="before")
    @classmethod
    def _blank_static_dir(cls, value: Any) -> Any:
        # TOML has no null; an empty string disables the static directory.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("catalog_name")
    @classmethod
    def _validate_catalog_name(cls, value: str) -> str:
        name = value.strip()
        if not name or "/" in name or "\\" in name or name in {".", ".."}:
            raise ValueError("catalog_name must be a plain file name")
        return name

    @model_validator(mode="after")
    def _outputs_clear_of_inputs(self) -> BundleConfig:
        output, archive = self.output_dir, self.archive_path
        if _contains(output, archive):
            raise ValueError("archive_path must not live inside output_dir")
        inputs = [*self.group_roots().values(), *self.static_assets]
        if self.static_dir is not None:
            inputs.append(self.static_dir)
        for source in inputs:
            if _contains(output, source) or _contains(source, output):
                raise ValueError(f"output_dir overlaps input {source}")
            if _contains(source, archive):
                raise ValueError(f"archive_path overlaps input {source}")
        return self

    def group_roots(self) -> dict[DialectGroup, Path]:
        """Return the classification root bound to each dialect group.

        Returns:
            dict[DialectGroup, Path]: Roots keyed by group in group order.
        """

        return {
            DialectGroup.BASE_SET: self.base_set_root,
            DialectGroup.EXTENDED_SET: self.extended_set_root,
            DialectGroup.COMMUNITY_EXAMPLES: self.community_root,
        }

    def resolved(self, project_root: Path) -> BundleConfig:
        """Return a copy with every relative path anchored at ``project_root``.

        Args:
            project_root: Directory that relative paths are interpreted against.

        Returns:
            BundleConfig: Configuration holding absolute paths.
        """

        root = project_root.resolve()

        def anchor(path: Path) -> Path:
            return path if path.is_absolute() else root / path

        def anchor_pattern(pattern: str) -> str:
            if Path(pattern).is_absolute():
                return pattern
            return f"{glob.escape(root.as_posix())}/{pattern}"

        return type(self).model_validate(
            {
                **self.model_dump(),
                "base_set_root": anchor(self.base_set_root),
                "extended_set_root": anchor(self.extended_set_root),
                "community_root": anchor(self.community_root),
                "output_dir": anchor(self.output_dir),
                "archive_path": anchor(self.archive_path),
                "static_dir": anchor(self.static_dir) if self.static_dir is not None else None,
                "static_assets": tuple(anchor(path) for path in self.static_assets),
                "compiled_artifacts": tuple(anchor_pattern(pattern) for pattern in self.compiled_artifacts),
            }
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping of the configuration."""

        return self.model_dump(mode="json")


def _contains(parent: Path, child: Path) -> bool:
    """Return whether ``child`` is ``parent`` or lies beneath it.

    Relative and absolute paths are not compared; :meth:`BundleConfig.resolved`
    validates again once every path is absolute.
    """

    if parent.is_absolute() != child.is_absolute():
        return False
    return child == parent or child.is_relative_to(parent)


__all__: Final = [
    "DEFAULT_CATALOG_NAME",
    "BundleConfig",
    "ConfigError",
]
