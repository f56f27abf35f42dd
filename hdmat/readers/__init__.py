"""Archive readers and the helpers that pick one for a source path."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from ..interfaces.data_sources import ArchiveReader
from .dfsu import DfsuArchiveReader, read_mesh_centroids
from .npz import NpzArchiveReader, is_npz_archive, write_npz_archive


def open_archive(path: str | Path, mesh_file: str | Path | None = None) -> ArchiveReader:
    """Open ``path`` with the matching reader, optionally overriding its mesh.

    Args:
        path: A ``.dfsu`` file or an hdmat ``.npz`` archive directory.
        mesh_file: Optional ``.npz`` (``X``/``Y``/``Z``) or MIKE ``.mesh`` file
            whose coordinates replace those stored in the archive.

    Returns:
        An opened :class:`ArchiveReader`. Use it as a context manager.
    """

    source = Path(path)
    mesh = load_mesh(mesh_file) if mesh_file is not None else None
    if source.suffix.lower() == ".dfsu":
        return DfsuArchiveReader(source, mesh=mesh)
    if is_npz_archive(source):
        return NpzArchiveReader(source, mesh=mesh)
    if not source.exists():
        raise FileNotFoundError(f"Source archive not found: {source}")
    raise ValueError(f"Unsupported archive: {source}")


def load_mesh(path: str | Path) -> np.ndarray:
    """Load ``(n, 3)`` point coordinates from a ``.npz`` or MIKE ``.mesh`` file."""

    mesh_path = Path(path)
    if not mesh_path.exists():
        raise FileNotFoundError(f"Mesh file not found: {mesh_path}")
    if mesh_path.suffix.lower() == ".mesh":
        return read_mesh_centroids(mesh_path)
    with np.load(mesh_path, allow_pickle=False) as mesh:
        return np.column_stack([np.asarray(mesh[key], dtype=np.float64) for key in ("X", "Y", "Z")])


__all__ = [
    "ArchiveReader",
    "DfsuArchiveReader",
    "NpzArchiveReader",
    "open_archive",
    "load_mesh",
    "write_npz_archive",
]
