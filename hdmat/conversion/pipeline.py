"""Top-level conversion of one archive into a dual-orientation matrix store."""

from __future__ import annotations

import logging
from pathlib import Path

from ..interfaces.config import ConversionConfig
from ..interfaces.conversion import ConversionResult
from ..interfaces.launch_options import ConvertOptions
from ..interfaces.metadata import SimulationMetadata
from ..readers import open_archive
from ..store import Hdf5FieldSink
from ..utils.config import load_config
from ..utils.console import quiet_logging
from ..utils.paths import resolve_destination
from .indices import resolve_indices
from .materializer import ProgressCallback, materialize
from .parameters import select_parameters

logger = logging.getLogger(__name__)


class ArchiveConverter:
    """Resolves plans for an archive and materializes it into an HDF5 store."""

    def __init__(self, config: ConversionConfig | None = None) -> None:
        self.config = config or load_config()

    def convert(
        self,
        options: ConvertOptions,
        progress: ProgressCallback | None = None,
    ) -> ConversionResult:
        """Run one conversion described by ``options``.

        The reader and the store are released on every exit path. Plans are
        resolved before the store is opened, so configuration errors never
        touch the destination. A failure during materialization leaves the
        store marked incomplete. A non-verbose run only logs warnings.
        """

        config = self.config.with_overrides(
            stride=options.stride,
            verbose=options.verbose,
            all_parameters=options.all_parameters,
        )
        with quiet_logging(not config.verbose):
            return self._run(options, config, progress)

    def _run(
        self,
        options: ConvertOptions,
        config: ConversionConfig,
        progress: ProgressCallback | None,
    ) -> ConversionResult:
        source = Path(options.source)
        destination = resolve_destination(source, options.destination)
        logger.info("Getting HD from file '%s'", source)

        with open_archive(source, mesh_file=options.mesh_file) as reader:
            metadata = reader.metadata
            index_plan = resolve_indices(
                options.timesteps,
                config.stride,
                metadata.index_order,
                options.index_order,
                metadata.num_timesteps,
                metadata.num_points,
            )
            logger.info("Preparing indices for parameters: %s", ", ".join(metadata.parameter_names))
            parameter_plan = select_parameters(
                metadata.parameters,
                rules=config.parameter_rules,
                mass_patterns=config.mass_patterns,
                reserved=metadata.extras,
            )

            with Hdf5FieldSink(
                destination,
                chunk_columns=config.chunk_columns,
                transpose_block_rows=config.transpose_block_rows,
                compression=config.compression,
                compression_level=config.compression_level,
            ) as sink:
                sink.write_attributes({"source": str(source), "hdmat_version": config.version})
                summary = materialize(
                    reader,
                    metadata,
                    index_plan,
                    parameter_plan,
                    sink,
                    all_parameters=config.all_parameters,
                    progress=progress,
                    progress_interval=_log_interval(config, progress),
                )
                sink.mark_complete()

        logger.info("DONE! Wrote %d columns to %s", summary.columns, destination)
        return ConversionResult(
            source=source,
            destination=destination,
            index_plan=index_plan,
            parameter_plan=parameter_plan,
            summary=summary,
        )


def _log_interval(config: ConversionConfig, progress: ProgressCallback | None) -> int:
    # A progress bar or a quiet run replaces the periodic "Timestep k of N" lines.
    if progress is not None or not config.verbose:
        return 0
    return config.progress_interval


def convert(
    options: ConvertOptions,
    config: ConversionConfig | None = None,
    progress: ProgressCallback | None = None,
) -> ConversionResult:
    """Convert ``options.source`` into ``options.destination``."""

    if config is None:
        config = load_config(options.config_path)
    return ArchiveConverter(config).convert(options, progress=progress)


def inspect_archive(source: str | Path, mesh_file: str | Path | None = None) -> SimulationMetadata:
    """Return the metadata of ``source`` without converting it."""

    with open_archive(source, mesh_file=mesh_file) as reader:
        return reader.metadata
