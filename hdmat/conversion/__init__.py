"""Archive-to-matrix conversion: index plans, parameter plans, materialization.

===================================================================================
OVERVIEW
===================================================================================
A conversion runs in three steps:

    resolve_indices()    -> IndexPlan      spatial permutation + timestep selection
    select_parameters()  -> ParameterPlan  retained fields + distinguished lookups
    materialize()        -> MaterializeSummary

``materialize`` streams the selected timesteps through an ArchiveReader, writes
each permuted vector as the next column of a space-major matrix, then derives
the time-major ``<Field>TimeRow`` transposes once every column is in place.

===================================================================================
SUBMODULE STRUCTURE
===================================================================================

indices:
    resolve_indices(requested, stride, default_order, explicit_order, nt, np)
    Contiguous requests collapse to start:stride:stop; irregular lists are kept
    verbatim and ignore the stride.

parameters:
    select_parameters(catalog, rules, mass_patterns) -> ParameterPlan
    field_name("U velocity") -> "UVelocity"

materializer:
    materialize(reader, metadata, index_plan, parameter_plan, sink, ...)

pipeline:
    ArchiveConverter / convert(options) - scoped reader + HDF5 store
    inspect_archive(source) - metadata only

===================================================================================
ERROR HANDLING
===================================================================================

  - ConfigurationError / AmbiguousParameterError: raised before any write
  - ArchiveReadError: raised mid-stream, earlier columns stay in the store
  - SinkWriteError: destination unwritable

The store's ``complete`` attribute is only set after a successful run.

===================================================================================
"""

from .indices import resolve_indices
from .materializer import materialize
from .parameters import field_name, select_parameters
from .pipeline import ArchiveConverter, convert, inspect_archive

__all__ = [
    "ArchiveConverter",
    "convert",
    "field_name",
    "inspect_archive",
    "materialize",
    "resolve_indices",
    "select_parameters",
]
