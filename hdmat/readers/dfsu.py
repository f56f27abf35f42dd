"""MIKE ``.dfsu`` archives read through the optional ``mikeio`` package."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from ..interfaces.data_sources import ArchiveReader
from ..interfaces.errors import ArchiveReadError
from ..interfaces.metadata import ParameterInfo, SimulationMetadata

logger = logging.getLogger(__name__)


class DfsuArchiveReader(ArchiveReader):
    """Reader for flexible-mesh ``.dfsu`` results.

    Parameter indices are the 0-based item numbers used by ``mikeio``; values
    are element-centred, so the element centroids are the spatial points. The
    ``NodeX``/``NodeY``/``NodeZ`` extras are node-indexed and never permuted.
    """

    def __init__(self, path: str | Path, mesh: np.ndarray | None = None) -> None:
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(f"dfsu file not found: {self._path}")
        mikeio = _require_mikeio()
        self._dfs = mikeio.open(str(self._path))
        self._metadata = self._build_metadata()
        if mesh is not None:
            self._metadata = self._metadata.with_coordinates(mesh)

    @property
    def metadata(self) -> SimulationMetadata:
        return self._metadata

    def read_timestep_vector(self, parameter_index: int, timestep: int) -> np.ndarray:
        try:
            dataset = self._dfs.read(items=[parameter_index], time=timestep)
            values = np.asarray(dataset[0].to_numpy(), dtype=np.float64)
        except (OSError, ValueError, IndexError, KeyError) as exc:
            raise ArchiveReadError(
                f"Cannot read item {parameter_index} at timestep {timestep} from {self._path}: {exc}",
                parameter=parameter_index,
                timestep=timestep + 1,
            ) from exc
        return values.reshape(-1)

    def _build_metadata(self) -> SimulationMetadata:
        geometry = self._dfs.geometry
        centroids = np.asarray(geometry.element_coordinates, dtype=np.float64)
        nodes = np.asarray(geometry.node_coordinates, dtype=np.float64)
        time = self._dfs.time
        seconds = np.asarray((time - time[0]).total_seconds(), dtype=np.float64)
        parameters = tuple(
            ParameterInfo(name=item.name, index=idx, unit=_unit_name(item))
            for idx, item in enumerate(self._dfs.items)
        )
        logger.debug(
            "Opened %s: %d elements, %d timesteps, %d items",
            self._path,
            len(centroids),
            len(seconds),
            len(parameters),
        )
        return SimulationMetadata(
            x=centroids[:, 0],
            y=centroids[:, 1],
            z=centroids[:, 2],
            time=seconds,
            parameters=parameters,
            start_time=time[0].isoformat(),
            extras={"NodeX": nodes[:, 0], "NodeY": nodes[:, 1], "NodeZ": nodes[:, 2]},
        )


def read_mesh_centroids(path: str | Path) -> np.ndarray:
    """Return the ``(n, 3)`` element centroids of a MIKE ``.mesh`` file."""

    mikeio = _require_mikeio()
    mesh = mikeio.Mesh(str(path))
    return np.asarray(mesh.geometry.element_coordinates, dtype=np.float64)


def _unit_name(item: Any) -> str | None:
    unit = getattr(item, "unit", None)
    return getattr(unit, "name", None) if unit is not None else None


def _require_mikeio() -> Any:
    try:
        import mikeio
    except ImportError as exc:
        raise RuntimeError(
            "mikeio is required to read MIKE dfsu files. Install it with `pip install hdmat[dfsu]`."
        ) from exc
    return mikeio
