"""Utility helpers for resolving project and configuration paths."""

from __future__ import annotations

from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def project_root() -> Path:
    """Return the absolute path to the project root directory."""

    return _PROJECT_ROOT


def default_config_path() -> Path:
    """Return the path of the project-level ``config.yml``."""

    return _PROJECT_ROOT / "config.yml"


def resolve_destination(source: str | Path, destination: str | Path | None) -> Path:
    """Resolve the store path for ``source``.

    Args:
        source: Archive file or directory being converted.
        destination: Explicit target. A directory receives ``<source stem>.h5``;
            ``None`` places the store next to the source.

    Returns:
        Absolute path of the HDF5 store.
    """

    src = Path(source).expanduser().resolve()
    if destination is None:
        return src.with_suffix(".h5")
    target = Path(destination).expanduser().resolve()
    if target.is_dir():
        return target / f"{src.stem}.h5"
    return target
