"""Shared interfaces for archive conversion.

===================================================================================
OVERVIEW
===================================================================================
This package defines the contract between readers, the conversion core and
persistence sinks:
  - Abstract base classes for archive readers and field sinks
  - Frozen dataclasses for metadata, plans, configuration and results
  - The exception hierarchy every stage raises

===================================================================================
SUBMODULE STRUCTURE
===================================================================================

metadata.py:
    ParameterInfo(name, index, unit)
    SimulationMetadata(x, y, z, time, parameters, start_time, index_order, extras,
                       point_extras)

plans.py:
    IndexPlan(spatial_order, timesteps, contiguous) - all 1-based
    SelectedParameter(name, index, field_name)
    ParameterPlan(parameters, horizontal_velocity, vertical_velocity,
                  surface_elevation)

data_sources.py:
    ArchiveReader - metadata + read_timestep_vector(parameter_index, timestep)

store.py:
    FieldSink - write_field / create_matrix / append_column / transpose_field

config.py:
    ConversionConfig - settings loaded from config.yml

launch_options.py:
    ConvertOptions - one conversion request (CLI or API)

conversion.py:
    MaterializeSummary, ConversionResult

errors.py:
    ConversionError
      ├─ ConfigurationError
      │    └─ AmbiguousParameterError
      ├─ ArchiveReadError
      └─ SinkWriteError

===================================================================================
"""

from .config import ConversionConfig
from .conversion import ConversionResult, MaterializeSummary
from .data_sources import ArchiveReader
from .errors import (
    AmbiguousParameterError,
    ArchiveReadError,
    ConfigurationError,
    ConversionError,
    SinkWriteError,
)
from .launch_options import ConvertOptions
from .metadata import ParameterInfo, SimulationMetadata
from .plans import IndexPlan, ParameterPlan, SelectedParameter
from .store import FieldSink

__all__ = [
    "AmbiguousParameterError",
    "ArchiveReadError",
    "ArchiveReader",
    "ConfigurationError",
    "ConversionConfig",
    "ConversionError",
    "ConversionResult",
    "ConvertOptions",
    "FieldSink",
    "IndexPlan",
    "MaterializeSummary",
    "ParameterInfo",
    "ParameterPlan",
    "SelectedParameter",
    "SimulationMetadata",
    "SinkWriteError",
]
