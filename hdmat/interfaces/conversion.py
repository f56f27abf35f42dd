"""Structured results for conversion workflows."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .plans import IndexPlan, ParameterPlan


@dataclass(frozen=True)
class MaterializeSummary:
    """What the materializer wrote into the store."""

    columns: int
    streamed_fields: tuple[str, ...]
    allocated_fields: tuple[str, ...]
    time_invariant_fields: tuple[str, ...]


@dataclass(frozen=True)
class ConversionResult:
    """Top-level summary of a finished conversion."""

    source: Path
    destination: Path
    index_plan: IndexPlan
    parameter_plan: ParameterPlan
    summary: MaterializeSummary

    @property
    def columns(self) -> int:
        return self.summary.columns
