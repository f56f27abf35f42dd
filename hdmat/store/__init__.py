"""Persistence sinks for materialized matrices."""

from .hdf5 import Hdf5FieldSink, is_complete, load_store

__all__ = ["Hdf5FieldSink", "is_complete", "load_store"]
