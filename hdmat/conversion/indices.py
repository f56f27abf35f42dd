"""Resolve the spatial permutation and temporal selection of a conversion."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ..interfaces.errors import ConfigurationError
from ..interfaces.plans import IndexPlan

logger = logging.getLogger(__name__)

ALL_TIMESTEPS = "all"


def resolve_indices(
    requested_timesteps: Sequence[int] | int | str | None,
    stride: int,
    default_spatial_order: Sequence[int] | None,
    explicit_spatial_order: Sequence[int] | None,
    total_timesteps: int,
    total_points: int,
) -> IndexPlan:
    """Build the :class:`IndexPlan` for one archive.

    Args:
        requested_timesteps: 1-based archive timesteps. ``None``, ``0``, ``"all"`` or
            an empty sequence selects every timestep.
        stride: Subsampling interval, only applied when the request is a
            contiguous ascending run.
        default_spatial_order: Reorder hint carried by the archive, if any.
        explicit_spatial_order: Caller-supplied permutation; wins over the hint.
        total_timesteps: Number of timesteps in the archive.
        total_points: Number of spatial points in the archive.

    Returns:
        The resolved :class:`IndexPlan`.

    Raises:
        ConfigurationError: On an invalid stride, a non-integer, empty or
            out-of-range temporal selection, or a permutation that is not a bijection.
    """

    timesteps, contiguous = _resolve_timesteps(requested_timesteps, stride, total_timesteps)
    spatial_order = _resolve_spatial_order(
        default_spatial_order, explicit_spatial_order, total_points
    )
    logger.debug(
        "Resolved %d of %d timesteps (contiguous=%s)",
        len(timesteps),
        total_timesteps,
        contiguous,
    )
    return IndexPlan(spatial_order=spatial_order, timesteps=timesteps, contiguous=contiguous)


def _resolve_timesteps(
    requested: Sequence[int] | int | str | None, stride: int, total: int
) -> tuple[np.ndarray, tuple[int, int, int] | None]:
    if isinstance(stride, bool) or not isinstance(stride, (int, np.integer)) or stride < 1:
        raise ConfigurationError(f"Timestep stride must be a positive integer, got {stride!r}")
    if total < 1:
        raise ConfigurationError("Archive contains no timesteps")

    if _selects_all(requested):
        sequence = np.arange(1, total + 1, dtype=np.int64)
    else:
        sequence = _as_timesteps(requested)

    if sequence.size == 0:
        raise ConfigurationError("Temporal selection is empty")

    low, high = int(sequence.min()), int(sequence.max())
    if low < 1 or high > total:
        raise ConfigurationError(
            f"Timesteps must lie within 1..{total}; requested range is {low}..{high}"
        )

    steps = np.diff(sequence)
    if np.all(steps == 1):
        start, stop = int(sequence[0]), int(sequence[-1])
        return np.arange(start, stop + 1, int(stride), dtype=np.int64), (start, int(stride), stop)

    if np.any(steps <= 0):
        raise ConfigurationError("Explicit timestep selections must be strictly increasing")
    return sequence, None


def _selects_all(requested: Sequence[int] | int | str | None) -> bool:
    if requested is None:
        return True
    if isinstance(requested, str) or np.ndim(requested) == 0:
        return _is_all_token(requested)
    values = list(requested)
    return not values or (len(values) == 1 and _is_all_token(values[0]))


def _is_all_token(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == ALL_TIMESTEPS
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating)) and value == 0


def _as_timesteps(requested: Sequence[int] | int | str) -> np.ndarray:
    try:
        values = np.atleast_1d(np.asarray(requested))
    except ValueError as exc:
        raise ConfigurationError(
            f"Timesteps must be a flat list of integers, got {requested!r}"
        ) from exc
    if values.ndim != 1 or values.dtype.kind not in "iuf":
        raise ConfigurationError(f"Timesteps must be a flat list of integers, got {requested!r}")
    if values.dtype.kind == "f" and not np.all(np.isfinite(values) & (values == np.round(values))):
        raise ConfigurationError(f"Timesteps must be whole numbers, got {requested!r}")
    return values.astype(np.int64)


def _resolve_spatial_order(
    default_order: Sequence[int] | None,
    explicit_order: Sequence[int] | None,
    total_points: int,
) -> np.ndarray:
    if explicit_order is not None and len(explicit_order) > 0:
        order = np.asarray(explicit_order, dtype=np.int64)
        origin = "explicit"
    elif default_order is not None and len(default_order) > 0:
        order = np.asarray(default_order, dtype=np.int64)
        origin = "archive"
    else:
        return np.arange(1, total_points + 1, dtype=np.int64)

    if order.ndim != 1 or order.size != total_points:
        raise ConfigurationError(
            f"The {origin} spatial order has {order.size} entries; expected {total_points}"
        )
    if not np.array_equal(np.sort(order), np.arange(1, total_points + 1)):
        raise ConfigurationError(
            f"The {origin} spatial order is not a permutation of 1..{total_points}"
        )
    return order
