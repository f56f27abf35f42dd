"""Immutable plans derived once before materialization starts."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class IndexPlan:
    """Spatial permutation and temporal selection applied to every field.

    ``spatial_order`` and ``timesteps`` are 1-based. ``contiguous`` holds the
    ``(start, stride, stop)`` triple when the request was a contiguous run; it
    describes exactly the same set as ``timesteps``.
    """

    spatial_order: np.ndarray
    timesteps: np.ndarray
    contiguous: tuple[int, int, int] | None = None

    @property
    def spatial_indexer(self) -> np.ndarray:
        return np.asarray(self.spatial_order, dtype=np.int64) - 1

    @property
    def count(self) -> int:
        return int(len(self.timesteps))

    @property
    def is_identity(self) -> bool:
        return bool(np.array_equal(self.spatial_order, np.arange(1, len(self.spatial_order) + 1)))


@dataclass(frozen=True)
class SelectedParameter:
    """A retained catalogue entry and the store field it is written to."""

    name: str
    index: int
    field_name: str

    @property
    def time_row_name(self) -> str:
        return f"{self.field_name}TimeRow"


@dataclass(frozen=True)
class ParameterPlan:
    """Parameters to materialize plus the three distinguished fields."""

    parameters: tuple[SelectedParameter, ...]
    horizontal_velocity: SelectedParameter
    vertical_velocity: SelectedParameter
    surface_elevation: SelectedParameter

    @property
    def distinguished(self) -> tuple[SelectedParameter, ...]:
        return (self.surface_elevation, self.horizontal_velocity, self.vertical_velocity)

    @property
    def horizontal_velocity_index(self) -> int:
        return self.horizontal_velocity.index

    @property
    def vertical_velocity_index(self) -> int:
        return self.vertical_velocity.index

    @property
    def surface_elevation_index(self) -> int:
        return self.surface_elevation.index

    @property
    def field_names(self) -> list[str]:
        return [param.field_name for param in self.parameters]
