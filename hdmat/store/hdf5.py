"""HDF5-backed field store with column-wise growable matrices."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping

import h5py
import numpy as np

from ..interfaces.errors import SinkWriteError
from ..interfaces.store import FieldSink

logger = logging.getLogger(__name__)

COLUMNS_ATTR = "columns"
COMPLETE_ATTR = "complete"


class Hdf5FieldSink(FieldSink):
    """Write-through store of named datasets in a single HDF5 file.

    Matrices are chunked along columns and grown by doubling their capacity,
    so appending a column is amortised O(1). The number of committed columns
    is tracked per dataset and every matrix is trimmed to it on close.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        chunk_columns: int = 64,
        transpose_block_rows: int = 4096,
        compression: str | None = None,
        compression_level: int | None = None,
        mode: str = "w",
    ) -> None:
        if chunk_columns < 1:
            raise ValueError(f"chunk_columns must be positive, got {chunk_columns}")
        if transpose_block_rows < 1:
            raise ValueError(f"transpose_block_rows must be positive, got {transpose_block_rows}")
        self.path = Path(path)
        self.chunk_columns = int(chunk_columns)
        self.transpose_block_rows = int(transpose_block_rows)
        self.compression = compression
        self.compression_opts = compression_level if compression else None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = h5py.File(self.path, mode)
            self._file.attrs[COMPLETE_ATTR] = False
        except OSError as exc:
            raise SinkWriteError(f"Cannot open store {self.path} for writing: {exc}") from exc
        self._columns: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Whole fields
    # ------------------------------------------------------------------
    def write_field(self, name: str, value: np.ndarray) -> None:
        data = np.asarray(value)
        try:
            self._drop(name)
            if data.dtype.kind == "U":
                self._file.create_dataset(
                    name, data=data.astype(object), dtype=h5py.string_dtype()
                )
            else:
                self._file.create_dataset(name, data=data)
        except (OSError, ValueError, TypeError) as exc:
            raise SinkWriteError(f"Failed to write field '{name}': {exc}") from exc

    def read_field(self, name: str) -> np.ndarray:
        dataset = self._dataset(name)
        if name in self._columns:
            return dataset[:, : self._columns[name]]
        return dataset[()]

    def write_attributes(self, attributes: Mapping[str, Any]) -> None:
        try:
            for key, value in attributes.items():
                self._file.attrs[key] = "" if value is None else value
        except (OSError, TypeError) as exc:
            raise SinkWriteError(f"Failed to write store attributes: {exc}") from exc

    # ------------------------------------------------------------------
    # Growable matrices
    # ------------------------------------------------------------------
    def create_matrix(self, name: str, rows: int) -> None:
        rows = int(rows)
        chunks = (max(1, min(rows, self.transpose_block_rows)), self.chunk_columns)
        try:
            self._drop(name)
            dataset = self._file.create_dataset(
                name,
                shape=(rows, 0),
                maxshape=(rows, None),
                dtype="f8",
                chunks=chunks,
                compression=self.compression,
                compression_opts=self.compression_opts,
            )
            dataset.attrs[COLUMNS_ATTR] = 0
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Failed to create matrix '{name}': {exc}") from exc
        self._columns[name] = 0

    def append_column(self, name: str, column_index: int, vector: np.ndarray) -> None:
        if name not in self._columns:
            raise SinkWriteError(f"Matrix '{name}' was not created before appending")
        expected = self._columns[name]
        if column_index != expected:
            raise SinkWriteError(
                f"Column {column_index} of '{name}' is out of order; next column is {expected}"
            )
        dataset = self._file[name]
        values = np.asarray(vector, dtype=np.float64).reshape(-1)
        if values.size != dataset.shape[0]:
            raise SinkWriteError(
                f"Column for '{name}' has {values.size} rows; matrix has {dataset.shape[0]}"
            )
        try:
            if column_index >= dataset.shape[1]:
                capacity = max(self.chunk_columns, 2 * dataset.shape[1])
                dataset.resize((dataset.shape[0], capacity))
            dataset[:, column_index] = values
            dataset.attrs[COLUMNS_ATTR] = column_index + 1
        except (OSError, ValueError) as exc:
            raise SinkWriteError(
                f"Failed to write column {column_index} of '{name}': {exc}"
            ) from exc
        self._columns[name] = column_index + 1

    def column_count(self, name: str) -> int:
        if name in self._columns:
            return self._columns[name]
        return int(self._dataset(name).shape[1])

    def transpose_field(self, source: str, target: str) -> None:
        """Write ``source.T`` to ``target`` one chunk-aligned tile at a time.

        Tiles span ``transpose_block_rows`` rows and ``chunk_columns`` columns
        of ``source``, so memory use does not grow with the number of timesteps.
        """

        matrix = self._dataset(source)
        rows = matrix.shape[0]
        columns = self.column_count(source)
        chunks = None
        if columns and rows:
            chunks = (min(columns, self.chunk_columns), min(rows, self.transpose_block_rows))
        try:
            self._drop(target)
            transposed = self._file.create_dataset(
                target,
                shape=(columns, rows),
                dtype=matrix.dtype,
                chunks=chunks,
                compression=self.compression,
                compression_opts=self.compression_opts,
            )
            for row_slice, column_slice in transpose_tiles(
                rows, columns, self.transpose_block_rows, self.chunk_columns
            ):
                transposed[column_slice, row_slice] = matrix[row_slice, column_slice].T
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Failed to transpose '{source}' into '{target}': {exc}") from exc

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def mark_complete(self) -> None:
        self._trim()
        self._file.attrs[COMPLETE_ATTR] = True
        self._file.flush()

    def close(self) -> None:
        if not self._file:
            return
        try:
            self._trim()
        finally:
            self._file.close()
        logger.debug("Closed store %s", self.path)

    def _trim(self) -> None:
        for name, columns in self._columns.items():
            dataset = self._file[name]
            if dataset.shape[1] != columns:
                dataset.resize((dataset.shape[0], columns))

    def _drop(self, name: str) -> None:
        if name in self._file:
            del self._file[name]
        self._columns.pop(name, None)

    def _dataset(self, name: str) -> h5py.Dataset:
        if name not in self._file:
            raise KeyError(f"Field '{name}' not found in {self.path}")
        return self._file[name]


def transpose_tiles(
    rows: int, columns: int, block_rows: int, block_columns: int
) -> Iterator[tuple[slice, slice]]:
    """Yield ``(row_slice, column_slice)`` tiles covering a ``rows x columns`` matrix."""

    for row_start in range(0, rows, block_rows):
        row_slice = slice(row_start, min(row_start + block_rows, rows))
        for column_start in range(0, columns, block_columns):
            yield row_slice, slice(column_start, min(column_start + block_columns, columns))


def is_complete(path: str | Path) -> bool:
    """Return ``True`` if the store at ``path`` was marked complete."""

    with h5py.File(path, "r") as handle:
        return bool(handle.attrs.get(COMPLETE_ATTR, False))


def load_store(path: str | Path) -> dict[str, np.ndarray]:
    """Read every dataset of a finished store into memory."""

    fields: dict[str, np.ndarray] = {}
    with h5py.File(path, "r") as handle:
        for name, dataset in handle.items():
            value = dataset[()]
            if isinstance(value, bytes) or (
                isinstance(value, np.ndarray) and value.dtype.kind in {"O", "S"}
            ):
                value = dataset.asstr()[()]
            fields[name] = value
    return fields
