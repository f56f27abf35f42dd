"""Invocation options consumed by the CLI and the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence


@dataclass(frozen=True)
class ConvertOptions:
    """Inputs that drive a single archive conversion.

    ``None`` for ``stride``, ``verbose`` or ``all_parameters`` defers to the
    loaded :class:`~hdmat.interfaces.config.ConversionConfig`.
    """

    source: Path
    destination: Path | None = None
    timesteps: Sequence[int] | str | None = None  # None or "all" means every timestep
    stride: int | None = None
    verbose: bool | None = None
    all_parameters: bool | None = None
    index_order: Sequence[int] | None = None
    mesh_file: Path | None = None
    config_path: Path | None = None

    def command_hint(self) -> str:
        args = [f"hdmat convert {self.source}"]
        if self.destination:
            args.append(str(self.destination))
        if isinstance(self.timesteps, str):
            args.append(f"--ts {self.timesteps}")
        elif self.timesteps:
            args.append("--ts " + " ".join(str(ts) for ts in self.timesteps))
        if self.stride is not None:
            args.append(f"--dt {self.stride}")
        if self.mesh_file:
            args.append(f"--mesh-file {self.mesh_file}")
        if self.all_parameters is False:
            args.append("--reference-scope")
        if self.verbose is False:
            args.append("--quiet")
        if self.config_path:
            args.append(f"--config {self.config_path}")
        return " ".join(args)
