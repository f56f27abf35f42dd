"""hdmat: hydrodynamic archives as dual-orientation matrix stores.

===================================================================================
OVERVIEW
===================================================================================
hdmat converts the per-timestep output of a mesh-based hydrodynamic model
(for example a MIKE ``.dfsu`` file) into an HDF5 store holding every field
twice:

    Field         [Np x Nt]   Field[:, t]        -> all points at one time
    FieldTimeRow  [Nt x Np]   FieldTimeRow[:, p] -> full time series at a point

Conversions stream the archive one timestep at a time, so archives far larger
than memory can be converted.

===================================================================================
ARCHITECTURE
===================================================================================

    hdmat/
    ├── cli/          argparse entry point (hdmat convert | hdmat inspect)
    ├── conversion/   index resolver, parameter selector, materializer, pipeline
    ├── interfaces/   dataclasses, abstract reader/sink, exception hierarchy
    ├── readers/      .npz directory archives, MIKE .dfsu via mikeio
    ├── store/        HDF5 sink with column-growable matrices (h5py)
    └── utils/        paths, YAML config, Rich logging and progress

===================================================================================
SYSTEM FLOW
===================================================================================

    open_archive(source) ──► SimulationMetadata
            │
            ├─► resolve_indices()   ──► IndexPlan
            ├─► select_parameters() ──► ParameterPlan
            ▼
    materialize(reader, metadata, plans, Hdf5FieldSink)
            │   for each selected timestep: read ► permute ► append column
            ▼
    transpose_field(Field -> FieldTimeRow)   once, after the last column
            ▼
    store.attrs["complete"] = True

===================================================================================
USAGE EXAMPLE
===================================================================================

from pathlib import Path
from hdmat.conversion import convert
from hdmat.interfaces import ConvertOptions

result = convert(ConvertOptions(source=Path("run.dfsu"), destination=Path("run.h5"),
                                stride=2))
print(result.summary.streamed_fields)

===================================================================================
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
