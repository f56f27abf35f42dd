"""Configuration loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from ..interfaces.config import ConversionConfig
from .paths import default_config_path


def load_config(path: str | Path | None = None) -> ConversionConfig:
    """Load conversion settings from ``config.yml``.

    Args:
        path: Optional path override. Defaults to ``<project_root>/config.yml``;
            built-in defaults are used when that file does not exist.

    Returns:
        A :class:`~hdmat.interfaces.config.ConversionConfig` populated from YAML.
    """

    if path is None:
        config_path = default_config_path()
        if not config_path.exists():
            return ConversionConfig()
    else:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found at {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw: Mapping[str, Any] = yaml.safe_load(handle) or {}

    return config_from_mapping(raw)


def config_from_mapping(raw: Mapping[str, Any]) -> ConversionConfig:
    """Build a :class:`ConversionConfig` from parsed YAML."""

    defaults = ConversionConfig()
    conversion = raw.get("conversion", {}) or {}
    store = raw.get("store", {}) or {}
    parameters = conversion.get("parameters", {}) or {}

    mass_patterns = conversion.get("mass_patterns", defaults.mass_patterns)
    if isinstance(mass_patterns, str):
        mass_patterns = [mass_patterns]
    compression = store.get("compression", defaults.compression)
    level = store.get("compression_level", defaults.compression_level)

    return ConversionConfig(
        version=str(raw.get("version", defaults.version)),
        stride=int(conversion.get("stride", defaults.stride)),
        verbose=bool(conversion.get("verbose", defaults.verbose)),
        all_parameters=bool(conversion.get("all_parameters", defaults.all_parameters)),
        progress_interval=int(conversion.get("progress_interval", defaults.progress_interval)),
        mass_patterns=tuple(str(pattern) for pattern in mass_patterns),
        horizontal_velocity=str(
            parameters.get("horizontal_velocity", defaults.horizontal_velocity)
        ),
        vertical_velocity=str(parameters.get("vertical_velocity", defaults.vertical_velocity)),
        surface_elevation=str(parameters.get("surface_elevation", defaults.surface_elevation)),
        chunk_columns=int(store.get("chunk_columns", defaults.chunk_columns)),
        transpose_block_rows=int(
            store.get("transpose_block_rows", defaults.transpose_block_rows)
        ),
        compression=str(compression) if compression else None,
        compression_level=int(level) if level is not None else None,
    )
