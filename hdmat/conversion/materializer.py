"""Stream archive timesteps into space-major matrices and their transposes."""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from ..interfaces.conversion import MaterializeSummary
from ..interfaces.data_sources import ArchiveReader
from ..interfaces.errors import ArchiveReadError
from ..interfaces.metadata import SimulationMetadata
from ..interfaces.plans import IndexPlan, ParameterPlan, SelectedParameter
from ..interfaces.store import FieldSink

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def materialize(
    reader: ArchiveReader,
    metadata: SimulationMetadata,
    index_plan: IndexPlan,
    parameter_plan: ParameterPlan,
    sink: FieldSink,
    *,
    all_parameters: bool = True,
    progress: ProgressCallback | None = None,
    progress_interval: int = 100,
) -> MaterializeSummary:
    """Write the selected timesteps of ``reader`` into ``sink``.

    Every streamed parameter ends up as ``<Field>`` with shape
    ``[num_points x num_selected]`` and ``<Field>TimeRow``, its exact
    transpose. Columns are appended strictly in selection order.

    Args:
        reader: Opened archive.
        metadata: Metadata of ``reader``.
        index_plan: Spatial permutation and temporal selection.
        parameter_plan: Fields to allocate and the distinguished parameters.
        sink: Destination store, exclusively owned for the call.
        all_parameters: Stream every selected parameter. ``False`` streams only
            surface elevation and the two velocity components; the remaining
            fields are allocated with zero columns.
        progress: Called as ``progress(done, total)`` after each column.
        progress_interval: Log a progress line every this many columns.

    Returns:
        A :class:`MaterializeSummary` of the fields written.

    Raises:
        ArchiveReadError: If any read fails; columns written before the
            failing timestep stay in ``sink``.
        SinkWriteError: If ``sink`` rejects a write.
    """

    indexer = index_plan.spatial_indexer
    num_points = metadata.num_points
    total = index_plan.count

    invariant = _write_time_invariant(metadata, index_plan, sink)

    for param in parameter_plan.parameters:
        sink.create_matrix(param.field_name, num_points)
    streamed = _streamed_parameters(parameter_plan, all_parameters)

    logger.info("%d time steps to extract", total)
    for position, timestep in enumerate(index_plan.timesteps):
        columns = [
            _read_column(reader, param, int(timestep), position, num_points)[indexer]
            for param in streamed
        ]
        for param, column in zip(streamed, columns):
            sink.append_column(param.field_name, position, column)
        done = position + 1
        if progress is not None:
            progress(done, total)
        if progress_interval and done % progress_interval == 0:
            logger.info("Timestep %d of %d", done, total)

    logger.info("Creating transposed fields...")
    for param in streamed:
        sink.transpose_field(param.field_name, param.time_row_name)

    allocated = tuple(
        param.field_name for param in parameter_plan.parameters if param not in streamed
    )
    if allocated:
        logger.warning(
            "Fields allocated but not populated: %s", ", ".join(allocated)
        )
    return MaterializeSummary(
        columns=total,
        streamed_fields=tuple(param.field_name for param in streamed),
        allocated_fields=allocated,
        time_invariant_fields=invariant,
    )


def _streamed_parameters(
    plan: ParameterPlan, all_parameters: bool
) -> tuple[SelectedParameter, ...]:
    if all_parameters:
        return plan.parameters
    return plan.distinguished


def _read_column(
    reader: ArchiveReader,
    param: SelectedParameter,
    timestep: int,
    position: int,
    num_points: int,
) -> np.ndarray:
    try:
        vector = reader.read_timestep_vector(param.index, timestep - 1)
    except ArchiveReadError as exc:
        raise ArchiveReadError(
            f"Failed to read '{param.name}' at timestep {timestep} (column {position + 1}): {exc}",
            parameter=param.name,
            timestep=timestep,
            position=position + 1,
        ) from exc
    values = np.asarray(vector, dtype=np.float64).reshape(-1)
    if values.size != num_points:
        raise ArchiveReadError(
            f"'{param.name}' at timestep {timestep} has {values.size} values; expected {num_points}",
            parameter=param.name,
            timestep=timestep,
            position=position + 1,
        )
    return values


def _write_time_invariant(
    metadata: SimulationMetadata, index_plan: IndexPlan, sink: FieldSink
) -> tuple[str, ...]:
    indexer = index_plan.spatial_indexer
    selection = index_plan.timesteps - 1
    fields: dict[str, np.ndarray] = {
        "X": np.asarray(metadata.x)[indexer],
        "Y": np.asarray(metadata.y)[indexer],
        "Z": np.asarray(metadata.z)[indexer],
        "Time": np.asarray(metadata.time)[selection],
        "TimestepIndices": np.asarray(index_plan.timesteps),
        "IndexOrder": np.asarray(index_plan.spatial_order),
    }
    for name, value in metadata.extras.items():
        array = np.asarray(value)
        if name in metadata.point_extras:
            array = array[indexer]
        fields.setdefault(name, array)

    for name, value in fields.items():
        logger.debug("Assigning field %s", name)
        sink.write_field(name, value)
    sink.write_attributes(
        {
            "start_time": metadata.start_time,
            "num_points": metadata.num_points,
            "num_timesteps": index_plan.count,
        }
    )
    return tuple(fields)

