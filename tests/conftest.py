"""Shared fixtures: small synthetic archives written to ``tmp_path``."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from hdmat.interfaces.metadata import ParameterInfo, SimulationMetadata
from hdmat.readers.npz import write_npz_archive

NUM_POINTS = 6
NUM_TIMESTEPS = 10

CATALOG = (
    ParameterInfo(name="Surface elevation", index=1, unit="meter"),
    ParameterInfo(name="U velocity", index=2, unit="meter per sec"),
    ParameterInfo(name="V velocity", index=3, unit="meter per sec"),
    ParameterInfo(name="MassFlux", index=4),
    ParameterInfo(name="Current speed", index=5, unit="meter per sec"),
)


def build_metadata(
    num_points: int = NUM_POINTS,
    num_timesteps: int = NUM_TIMESTEPS,
    index_order: np.ndarray | None = None,
    parameters: tuple[ParameterInfo, ...] = CATALOG,
) -> SimulationMetadata:
    points = np.arange(num_points, dtype=np.float64)
    return SimulationMetadata(
        x=100.0 + points,
        y=200.0 + points,
        z=-points,
        time=np.arange(num_timesteps, dtype=np.float64) * 1800.0,
        parameters=parameters,
        start_time="2018-09-25T00:00:00",
        index_order=index_order,
        extras={"Depth": -5.0 - points, "Projection": np.array("UTM-30")},
        point_extras=frozenset({"Depth"}),
    )


def build_data(
    metadata: SimulationMetadata, seed: int = 7
) -> dict[int, np.ndarray]:
    rng = np.random.default_rng(seed)
    shape = (metadata.num_timesteps, metadata.num_points)
    return {param.index: rng.normal(size=shape) for param in metadata.parameters}


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., tuple[Path, SimulationMetadata, dict[int, np.ndarray]]]:
    """Factory writing an archive and returning ``(path, metadata, data)``."""

    counter = {"n": 0}

    def _make(**kwargs) -> tuple[Path, SimulationMetadata, dict[int, np.ndarray]]:
        counter["n"] += 1
        metadata = build_metadata(**kwargs)
        data = build_data(metadata)
        root = write_npz_archive(tmp_path / f"archive_{counter['n']}", metadata, data)
        return root, metadata, data

    return _make


@pytest.fixture
def archive(make_archive) -> tuple[Path, SimulationMetadata, dict[int, np.ndarray]]:
    return make_archive()
