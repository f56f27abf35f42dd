"""Directory archives of per-timestep ``.npz`` snapshots.

Layout::

    archive/
        archive.yml        # parameters, start time, point-indexed extras
        mesh.npz           # X, Y, Z, Time, optional IndexOrder and extras
        steps/
            step_00000.npz # one array per parameter, keyed ``item_<index>``
            step_00001.npz
            ...
"""

from __future__ import annotations

import logging
import re
import zipfile
from pathlib import Path
from typing import Any, Mapping

import numpy as np
import yaml

from ..interfaces.data_sources import ArchiveReader
from ..interfaces.errors import ArchiveReadError
from ..interfaces.metadata import ParameterInfo, SimulationMetadata

logger = logging.getLogger(__name__)

MANIFEST_NAME = "archive.yml"
MESH_NAME = "mesh.npz"
STEPS_DIR = "steps"
FORMAT_TAG = "hdmat-npz"
_MESH_KEYS = ("X", "Y", "Z", "Time", "IndexOrder")
_STEP_RE = re.compile(r"step_([0-9]+)\.npz$")


def step_path(root: Path, timestep: int) -> Path:
    return root / STEPS_DIR / f"step_{timestep:05d}.npz"


def item_key(index: int) -> str:
    return f"item_{index}"


def is_npz_archive(path: str | Path) -> bool:
    root = Path(path)
    return root.is_dir() and (root / MANIFEST_NAME).exists()


class NpzArchiveReader(ArchiveReader):
    """Random-access reader over a directory of ``.npz`` timestep snapshots."""

    def __init__(self, root: str | Path, mesh: np.ndarray | None = None) -> None:
        self._root = Path(root)
        if not is_npz_archive(self._root):
            raise FileNotFoundError(
                f"No {MANIFEST_NAME} found under {self._root}. Is this an hdmat archive?"
            )
        self._metadata = self._load_metadata()
        if mesh is not None:
            self._metadata = self._metadata.with_coordinates(mesh)
        self._known_indices = {param.index: param.name for param in self._metadata.parameters}
        available = self._discover_steps()
        if len(available) < self._metadata.num_timesteps:
            logger.warning(
                "Archive %s lists %d timesteps but only %d snapshot files exist",
                self._root,
                self._metadata.num_timesteps,
                len(available),
            )

    @property
    def root(self) -> Path:
        return self._root

    @property
    def metadata(self) -> SimulationMetadata:
        return self._metadata

    def read_timestep_vector(self, parameter_index: int, timestep: int) -> np.ndarray:
        name = self._known_indices.get(parameter_index)
        if name is None:
            raise ArchiveReadError(
                f"Unknown parameter index {parameter_index} in {self._root}",
                parameter=parameter_index,
                timestep=timestep + 1,
            )
        if not 0 <= timestep < self._metadata.num_timesteps:
            raise ArchiveReadError(
                f"Timestep {timestep} outside 0..{self._metadata.num_timesteps - 1}",
                parameter=name,
                timestep=timestep + 1,
            )
        path = step_path(self._root, timestep)
        try:
            with np.load(path, allow_pickle=False) as snapshot:
                vector = np.asarray(snapshot[item_key(parameter_index)], dtype=np.float64)
        except (OSError, ValueError, KeyError, EOFError, zipfile.BadZipFile) as exc:
            raise ArchiveReadError(
                f"Cannot read '{name}' at timestep {timestep} from {path}: {exc}",
                parameter=name,
                timestep=timestep + 1,
            ) from exc
        return vector.reshape(-1)

    def _load_metadata(self) -> SimulationMetadata:
        with (self._root / MANIFEST_NAME).open("r", encoding="utf-8") as handle:
            manifest: Mapping[str, Any] = yaml.safe_load(handle) or {}
        if manifest.get("format", FORMAT_TAG) != FORMAT_TAG:
            raise ValueError(f"Unsupported archive format: {manifest.get('format')}")

        parameters = tuple(
            ParameterInfo(
                name=str(entry["name"]),
                index=int(entry["index"]),
                unit=entry.get("unit"),
            )
            for entry in manifest.get("parameters", [])
        )

        mesh_path = self._root / MESH_NAME
        if not mesh_path.exists():
            raise FileNotFoundError(f"Mesh file not found: {mesh_path}")
        with np.load(mesh_path, allow_pickle=False) as mesh:
            arrays = {key: np.asarray(mesh[key]) for key in mesh.files}

        missing = [key for key in ("X", "Y", "Z", "Time") if key not in arrays]
        if missing:
            raise KeyError(f"{mesh_path} is missing {', '.join(missing)}")

        start_time = manifest.get("start_time")
        extras = {key: value for key, value in arrays.items() if key not in _MESH_KEYS}
        return SimulationMetadata(
            x=arrays["X"].astype(np.float64),
            y=arrays["Y"].astype(np.float64),
            z=arrays["Z"].astype(np.float64),
            time=arrays["Time"].astype(np.float64),
            parameters=parameters,
            start_time=str(start_time) if start_time is not None else None,
            index_order=arrays.get("IndexOrder"),
            extras=extras,
            point_extras=frozenset(str(name) for name in manifest.get("point_extras") or []),
        )

    def _discover_steps(self) -> list[int]:
        steps_dir = self._root / STEPS_DIR
        if not steps_dir.exists():
            return []
        found = []
        for path in steps_dir.glob("step_*.npz"):
            match = _STEP_RE.search(path.name)
            if match:
                found.append(int(match.group(1)))
        return sorted(found)


def write_npz_archive(
    root: str | Path,
    metadata: SimulationMetadata,
    data: Mapping[int, np.ndarray],
) -> Path:
    """Persist an archive readable by :class:`NpzArchiveReader`.

    Args:
        root: Target directory, created if needed.
        metadata: Coordinates, time axis, catalogue and extras.
        data: Parameter index -> array of shape ``(num_timesteps, num_points)``.

    Returns:
        The archive directory.
    """

    target = Path(root)
    (target / STEPS_DIR).mkdir(parents=True, exist_ok=True)

    manifest = {
        "format": FORMAT_TAG,
        "start_time": metadata.start_time,
        "parameters": [
            {"name": param.name, "index": param.index, "unit": param.unit}
            for param in metadata.parameters
        ],
        "point_extras": sorted(metadata.point_extras),
    }
    with (target / MANIFEST_NAME).open("w", encoding="utf-8") as handle:
        yaml.safe_dump(manifest, handle, sort_keys=False)

    mesh: dict[str, np.ndarray] = {
        "X": np.asarray(metadata.x),
        "Y": np.asarray(metadata.y),
        "Z": np.asarray(metadata.z),
        "Time": np.asarray(metadata.time),
    }
    if metadata.index_order is not None:
        mesh["IndexOrder"] = np.asarray(metadata.index_order)
    mesh.update({key: np.asarray(value) for key, value in metadata.extras.items()})
    np.savez(target / MESH_NAME, **mesh)

    shapes = (metadata.num_timesteps, metadata.num_points)
    for index, values in data.items():
        if np.shape(values) != shapes:
            raise ValueError(
                f"Data for parameter {index} has shape {np.shape(values)}; expected {shapes}"
            )
    for timestep in range(metadata.num_timesteps):
        arrays = {item_key(index): np.asarray(values[timestep]) for index, values in data.items()}
        np.savez(step_path(target, timestep), **arrays)
    return target
