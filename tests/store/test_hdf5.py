"""Tests for the HDF5 field sink."""

import h5py
import numpy as np
import pytest

from hdmat.interfaces.errors import SinkWriteError
from hdmat.store import Hdf5FieldSink, is_complete, load_store
from hdmat.store.hdf5 import transpose_tiles


def test_append_grows_and_trims(tmp_path) -> None:
    path = tmp_path / "grow.h5"
    columns = np.arange(15.0).reshape(3, 5)
    with Hdf5FieldSink(path, chunk_columns=2) as sink:
        sink.create_matrix("Field", 3)
        for idx in range(5):
            sink.append_column("Field", idx, columns[:, idx])
        assert sink.column_count("Field") == 5
        np.testing.assert_array_equal(sink.read_field("Field"), columns)

    with h5py.File(path, "r") as handle:
        assert handle["Field"].shape == (3, 5)
        assert handle["Field"].attrs["columns"] == 5
        np.testing.assert_array_equal(handle["Field"][()], columns)


def test_capacity_doubles(tmp_path) -> None:
    with Hdf5FieldSink(tmp_path / "cap.h5", chunk_columns=4) as sink:
        sink.create_matrix("Field", 2)
        capacities = []
        for idx in range(9):
            sink.append_column("Field", idx, np.full(2, idx))
            capacities.append(sink._file["Field"].shape[1])
    assert capacities == [4, 4, 4, 4, 8, 8, 8, 8, 16]


def test_out_of_order_column_rejected(tmp_path) -> None:
    with Hdf5FieldSink(tmp_path / "order.h5") as sink:
        sink.create_matrix("Field", 2)
        sink.append_column("Field", 0, [1.0, 2.0])
        with pytest.raises(SinkWriteError):
            sink.append_column("Field", 2, [1.0, 2.0])


def test_wrong_length_column_rejected(tmp_path) -> None:
    with Hdf5FieldSink(tmp_path / "length.h5") as sink:
        sink.create_matrix("Field", 3)
        with pytest.raises(SinkWriteError):
            sink.append_column("Field", 0, [1.0, 2.0])


def test_append_to_missing_matrix(tmp_path) -> None:
    with Hdf5FieldSink(tmp_path / "missing.h5") as sink:
        with pytest.raises(SinkWriteError):
            sink.append_column("Nope", 0, [1.0])


@pytest.mark.parametrize("block_rows", [1, 2, 7, 4096])
def test_blockwise_transpose(tmp_path, block_rows: int) -> None:
    rng = np.random.default_rng(3)
    matrix = rng.normal(size=(7, 4))
    with Hdf5FieldSink(tmp_path / "t.h5", transpose_block_rows=block_rows, chunk_columns=3) as sink:
        sink.create_matrix("Field", 7)
        for idx in range(4):
            sink.append_column("Field", idx, matrix[:, idx])
        sink.transpose_field("Field", "FieldTimeRow")
        np.testing.assert_array_equal(sink.read_field("FieldTimeRow"), matrix.T)


def test_transpose_tiles_cover_matrix_once() -> None:
    covered = np.zeros((7, 10), dtype=int)
    tiles = list(transpose_tiles(7, 10, 3, 4))

    for row_slice, column_slice in tiles:
        covered[row_slice, column_slice] += 1
        assert row_slice.stop - row_slice.start <= 3
        assert column_slice.stop - column_slice.start <= 4
    assert len(tiles) == 9
    assert np.all(covered == 1)
    assert list(transpose_tiles(7, 0, 3, 4)) == []


def test_transpose_memory_is_bounded_by_one_tile(tmp_path, monkeypatch) -> None:
    """Each write into the time-major matrix spans at most one row block x column chunk."""
    written: list[tuple[int, ...]] = []
    original = h5py.Dataset.__setitem__

    def recording(self, key, value):
        if self.name == "/FieldTimeRow":
            written.append(np.shape(value))
        return original(self, key, value)

    monkeypatch.setattr(h5py.Dataset, "__setitem__", recording)
    matrix = np.arange(45.0).reshape(5, 9)
    with Hdf5FieldSink(tmp_path / "tiles.h5", transpose_block_rows=2, chunk_columns=4) as sink:
        sink.create_matrix("Field", 5)
        for idx in range(9):
            sink.append_column("Field", idx, matrix[:, idx])
        sink.transpose_field("Field", "FieldTimeRow")
        np.testing.assert_array_equal(sink.read_field("FieldTimeRow"), matrix.T)

    assert len(written) == 9
    assert all(columns <= 4 and rows <= 2 for columns, rows in written)


def test_complete_flag_and_attributes(tmp_path) -> None:
    path = tmp_path / "flag.h5"
    with Hdf5FieldSink(path, compression="gzip", compression_level=4) as sink:
        sink.write_attributes({"source": "run.dfsu", "start_time": None})
        sink.write_field("Time", np.array([0.0, 60.0]))
        sink.write_field("Projection", np.array("UTM-30"))
        sink.mark_complete()

    assert is_complete(path)
    fields = load_store(path)
    np.testing.assert_array_equal(fields["Time"], [0.0, 60.0])
    assert fields["Projection"] == "UTM-30"
    with h5py.File(path, "r") as handle:
        assert handle.attrs["source"] == "run.dfsu"
        assert handle.attrs["start_time"] == ""


def test_incomplete_without_mark(tmp_path) -> None:
    path = tmp_path / "partial.h5"
    with Hdf5FieldSink(path) as sink:
        sink.write_field("X", np.zeros(3))
    assert not is_complete(path)


def test_unwritable_destination(tmp_path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    with pytest.raises(SinkWriteError):
        Hdf5FieldSink(blocker / "store.h5")


def test_write_field_replaces_existing(tmp_path) -> None:
    with Hdf5FieldSink(tmp_path / "replace.h5") as sink:
        sink.write_field("X", np.zeros(3))
        sink.write_field("X", np.ones(5))
        np.testing.assert_array_equal(sink.read_field("X"), np.ones(5))
