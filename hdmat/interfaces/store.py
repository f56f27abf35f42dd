"""Interface of the field-addressable store matrices are written into."""

from __future__ import annotations

from typing import Any, Mapping

import numpy as np


class FieldSink:
    """Abstract named-field store that grows matrices one column at a time."""

    def write_field(self, name: str, value: np.ndarray) -> None:  # pragma: no cover
        raise NotImplementedError

    def create_matrix(self, name: str, rows: int) -> None:  # pragma: no cover
        """Create an empty ``rows x 0`` matrix, replacing any existing field."""

        raise NotImplementedError

    def append_column(
        self, name: str, column_index: int, vector: np.ndarray
    ) -> None:  # pragma: no cover
        """Write ``vector`` as 0-based column ``column_index`` of matrix ``name``."""

        raise NotImplementedError

    def column_count(self, name: str) -> int:  # pragma: no cover
        raise NotImplementedError

    def read_field(self, name: str) -> np.ndarray:  # pragma: no cover
        raise NotImplementedError

    def transpose_field(self, source: str, target: str) -> None:  # pragma: no cover
        """Write the exact transpose of matrix ``source`` under ``target``."""

        raise NotImplementedError

    def write_attributes(self, attributes: Mapping[str, Any]) -> None:  # pragma: no cover
        raise NotImplementedError

    def mark_complete(self) -> None:  # pragma: no cover
        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "FieldSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
