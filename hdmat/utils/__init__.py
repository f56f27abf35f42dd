"""Shared utilities for paths, configuration and console output.

paths.py:
    project_root() -> repository root
    default_config_path() -> <root>/config.yml
    resolve_destination(source, destination) -> target .h5 path

config.py:
    load_config(path=None) -> ConversionConfig from YAML
    config_from_mapping(raw) -> ConversionConfig

console.py:
    configure_logging(verbose) -> Rich-backed ``hdmat`` logger
    column_progress(description) -> progress(done, total) callback
"""

from .config import config_from_mapping, load_config
from .paths import default_config_path, project_root, resolve_destination

__all__ = [
    "config_from_mapping",
    "default_config_path",
    "load_config",
    "project_root",
    "resolve_destination",
]
