"""Archive metadata captured once when a source archive is opened."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping

import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class ParameterInfo:
    """One entry of the archive's parameter catalogue."""

    name: str
    index: int
    unit: str | None = None


@dataclass(frozen=True)
class SimulationMetadata:
    """Time-invariant description of a simulation archive."""

    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    time: np.ndarray  # seconds relative to start_time
    parameters: tuple[ParameterInfo, ...]
    start_time: str | None = None
    index_order: np.ndarray | None = None  # 1-based reorder hint
    extras: Mapping[str, np.ndarray] = field(default_factory=dict)
    # Names of extras indexed by spatial point; these follow the spatial permutation.
    point_extras: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not (len(self.x) == len(self.y) == len(self.z)):
            raise ValueError(
                f"Coordinate arrays differ in length: {len(self.x)}, {len(self.y)}, {len(self.z)}"
            )
        object.__setattr__(self, "point_extras", frozenset(self.point_extras))
        for name in self.point_extras:
            if name not in self.extras:
                raise ValueError(f"Point-indexed extra '{name}' is not among the extras")
            if np.ndim(self.extras[name]) < 1 or len(self.extras[name]) != len(self.x):
                raise ValueError(
                    f"Point-indexed extra '{name}' does not have one value per point"
                )

    @property
    def num_points(self) -> int:
        return int(len(self.x))

    @property
    def num_timesteps(self) -> int:
        return int(len(self.time))

    @property
    def parameter_names(self) -> list[str]:
        return [param.name for param in self.parameters]

    def with_coordinates(self, coords: np.ndarray) -> "SimulationMetadata":
        """Return a copy whose X/Y/Z come from an ``(n, 3)`` coordinate array."""

        points = np.asarray(coords, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 3 or points.shape[0] != self.num_points:
            raise ConfigurationError(
                f"Mesh override has shape {points.shape}; expected ({self.num_points}, 3)"
            )
        return replace(self, x=points[:, 0], y=points[:, 1], z=points[:, 2])
