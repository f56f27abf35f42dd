"""Interfaces for reading per-timestep vectors out of a simulation archive."""

from __future__ import annotations

import numpy as np

from .metadata import SimulationMetadata


class ArchiveReader:
    """Abstract handle over an opened simulation archive.

    A reader owns whatever runtime the archive format needs; it is acquired
    by opening it and released by :meth:`close` (or the ``with`` block).
    """

    @property
    def metadata(self) -> SimulationMetadata:  # pragma: no cover - protocol-like behavior
        raise NotImplementedError

    def read_timestep_vector(
        self, parameter_index: int, timestep: int
    ) -> np.ndarray:  # pragma: no cover - protocol-like behavior
        """Return the spatial vector of ``parameter_index`` at 0-based ``timestep``."""

        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
