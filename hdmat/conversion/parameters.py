"""Select the catalogue parameters to materialize and name their fields."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping, Sequence

from ..interfaces.errors import AmbiguousParameterError
from ..interfaces.metadata import ParameterInfo
from ..interfaces.plans import ParameterPlan, SelectedParameter

logger = logging.getLogger(__name__)

DEFAULT_MASS_PATTERNS = ("mass",)
DEFAULT_RULES = {
    "horizontal_velocity": "u velocity",
    "vertical_velocity": "v velocity",
    "surface_elevation": "surface elevation",
}
# Field names written by the materializer for time-invariant data.
RESERVED_FIELDS = frozenset({"X", "Y", "Z", "Time", "TimestepIndices", "IndexOrder"})
TIME_ROW_SUFFIX = "TimeRow"

_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def field_name(name: str) -> str:
    """Convert a catalogue name into a store field name.

    ``"U velocity"`` becomes ``"UVelocity"`` and ``"Surface  elevation"``
    becomes ``"SurfaceElevation"``.
    """

    words = _WORD_RE.findall(name)
    if not words:
        return "Field"
    joined = "".join(word[0].upper() + word[1:] for word in words)
    if joined[0].isdigit():
        joined = "F" + joined
    return joined


def normalize_name(name: str) -> str:
    """Lowercase ``name`` and collapse punctuation and whitespace to single spaces."""

    return " ".join(word.lower() for word in _WORD_RE.findall(name))


def matches_rule(name: str, pattern: str) -> bool:
    """Whole-word, case-insensitive substring match of ``pattern`` inside ``name``."""

    needle = normalize_name(pattern)
    if not needle:
        return False
    return f" {needle} " in f" {normalize_name(name)} "


def select_parameters(
    catalog: Sequence[ParameterInfo],
    rules: Mapping[str, str] | None = None,
    mass_patterns: Iterable[str] = DEFAULT_MASS_PATTERNS,
    reserved: Iterable[str] = (),
) -> ParameterPlan:
    """Filter ``catalog`` and resolve the distinguished parameters.

    Args:
        catalog: Parameter catalogue of the archive.
        rules: Patterns for ``horizontal_velocity``, ``vertical_velocity`` and
            ``surface_elevation``. Missing keys use :data:`DEFAULT_RULES`.
        mass_patterns: Case-insensitive substrings of bulk fields to drop.
        reserved: Additional field names already used in the store, such as
            pass-through metadata fields.

    Returns:
        The resulting :class:`ParameterPlan`.

    Raises:
        AmbiguousParameterError: If a distinguished rule does not match
            exactly one retained entry.
    """

    patterns = [pattern.lower() for pattern in mass_patterns if pattern]
    kept = [param for param in catalog if not _is_mass(param.name, patterns)]
    dropped = len(catalog) - len(kept)
    if dropped:
        logger.info("Skipping %d bulk parameter(s) matching %s", dropped, patterns)

    selected = tuple(_assign_field_names(kept, reserved))
    merged = {**DEFAULT_RULES, **(rules or {})}
    resolved = {key: _resolve_one(selected, merged[key]) for key in DEFAULT_RULES}

    for key, param in resolved.items():
        logger.debug("%s -> '%s' (index %d)", key, param.name, param.index)

    return ParameterPlan(
        parameters=selected,
        horizontal_velocity=resolved["horizontal_velocity"],
        vertical_velocity=resolved["vertical_velocity"],
        surface_elevation=resolved["surface_elevation"],
    )


def _is_mass(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(pattern in lowered for pattern in patterns)


def _assign_field_names(
    params: Sequence[ParameterInfo], reserved: Iterable[str] = ()
) -> Iterable[SelectedParameter]:
    taken: set[str] = set(RESERVED_FIELDS) | set(reserved)
    for param in params:
        base = field_name(param.name)
        candidate = base
        suffix = 2
        while candidate in taken or candidate + TIME_ROW_SUFFIX in taken:
            candidate = f"{base}{suffix}"
            suffix += 1
        taken.update({candidate, candidate + TIME_ROW_SUFFIX})
        yield SelectedParameter(name=param.name, index=param.index, field_name=candidate)


def _resolve_one(params: Sequence[SelectedParameter], pattern: str) -> SelectedParameter:
    matches = [param for param in params if matches_rule(param.name, pattern)]
    if len(matches) != 1:
        raise AmbiguousParameterError(pattern, [param.name for param in matches])
    return matches[0]
