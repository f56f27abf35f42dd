"""Command line entry point for converting simulation archives."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

import numpy as np

from ..conversion.indices import ALL_TIMESTEPS
from ..conversion.pipeline import convert, inspect_archive
from ..interfaces.errors import ConfigurationError, ConversionError
from ..interfaces.launch_options import ConvertOptions
from ..utils.config import load_config
from ..utils.console import column_progress, configure_logging
from .report import ConsoleReporter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdmat",
        description="Convert hydrodynamic simulation archives into dual-orientation matrix stores.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser("convert", help="Convert an archive to HDF5.")
    convert_parser.add_argument("source", type=Path, help="Source .dfsu file or .npz archive.")
    convert_parser.add_argument(
        "destination",
        type=Path,
        nargs="?",
        default=None,
        help="Target .h5 file or directory (default: next to the source).",
    )
    convert_parser.add_argument(
        "--ts",
        dest="timesteps",
        type=_timestep_arg,
        nargs="+",
        default=None,
        help="1-based timesteps to extract, or 'all' (default: all; 0 also means all).",
    )
    convert_parser.add_argument(
        "--dt",
        dest="stride",
        type=int,
        default=None,
        help="Extract every dt'th timestep of a contiguous selection.",
    )
    convert_parser.add_argument(
        "--index-order",
        type=Path,
        default=None,
        help="File (.npy or text) with a 1-based permutation of the spatial points.",
    )
    convert_parser.add_argument(
        "--mesh-file",
        type=Path,
        default=None,
        help="Mesh (.npz or .mesh) whose coordinates replace the archive's.",
    )
    convert_parser.add_argument(
        "--reference-scope",
        action="store_true",
        help="Only stream surface elevation and the two velocity components.",
    )
    _add_common_args(convert_parser)

    inspect_parser = subparsers.add_parser("inspect", help="List the parameters of an archive.")
    inspect_parser.add_argument("source", type=Path)
    inspect_parser.add_argument("--mesh-file", type=Path, default=None)
    _add_common_args(inspect_parser)

    return parser


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="Path to a config.yml.")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output and informational messages.",
    )


def _timestep_arg(value: str) -> int | str:
    if value.strip().lower() == ALL_TIMESTEPS:
        return ALL_TIMESTEPS
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid timestep {value!r}: expected an integer or '{ALL_TIMESTEPS}'"
        ) from None


def read_index_order(path: Path) -> np.ndarray:
    """Load a 1-based spatial permutation from ``.npy`` or whitespace text."""

    if not path.exists():
        raise FileNotFoundError(f"Index order file not found: {path}")
    if path.suffix.lower() == ".npy":
        values = np.load(path, allow_pickle=False)
    else:
        values = np.loadtxt(path, dtype=np.int64, ndmin=1)
    return np.asarray(values, dtype=np.int64).reshape(-1)


def options_from_args(args: argparse.Namespace) -> ConvertOptions:
    return ConvertOptions(
        source=args.source,
        destination=args.destination,
        timesteps=args.timesteps,
        stride=args.stride,
        verbose=False if args.quiet else None,
        all_parameters=False if args.reference_scope else None,
        index_order=read_index_order(args.index_order) if args.index_order else None,
        mesh_file=args.mesh_file,
        config_path=args.config,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    reporter = ConsoleReporter()
    options: ConvertOptions | None = None

    try:
        config = load_config(args.config)
        verbose = config.verbose and not args.quiet
        configure_logging(verbose)

        if args.command == "inspect":
            reporter.catalogue(str(args.source), inspect_archive(args.source, args.mesh_file))
            return 0

        options = options_from_args(args)
        with column_progress("Materializing timesteps", enabled=verbose) as progress:
            result = convert(options, config=config, progress=progress)
        reporter.success(result)
        return 0
    except ConfigurationError as error:
        reporter.wrap_error(error, options)
        return 2
    except (ConversionError, FileNotFoundError, ValueError, RuntimeError) as error:
        logger.debug("Conversion aborted", exc_info=True)
        reporter.wrap_error(error, options)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
