"""Configuration interfaces and data structures."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ConversionConfig:
    """Runtime configuration for archive conversions."""

    version: str = "0.0.0"
    stride: int = 1
    verbose: bool = True
    all_parameters: bool = True
    progress_interval: int = 100
    mass_patterns: tuple[str, ...] = ("mass",)
    horizontal_velocity: str = "u velocity"
    vertical_velocity: str = "v velocity"
    surface_elevation: str = "surface elevation"
    chunk_columns: int = 64
    transpose_block_rows: int = 4096
    compression: str | None = None
    compression_level: int | None = None

    @property
    def parameter_rules(self) -> dict[str, str]:
        return {
            "horizontal_velocity": self.horizontal_velocity,
            "vertical_velocity": self.vertical_velocity,
            "surface_elevation": self.surface_elevation,
        }

    def with_overrides(self, **overrides: Any) -> "ConversionConfig":
        """Return a copy with every non-``None`` override applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)

    def __getitem__(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)
