"""Rich panels used by the command line to report results and failures."""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..interfaces.conversion import ConversionResult
from ..interfaces.launch_options import ConvertOptions
from ..interfaces.metadata import SimulationMetadata
from ..utils.console import console as default_console


@dataclass
class ConsoleReporter:
    console: Console = field(default_factory=lambda: default_console)

    def say(self, message: str, style: str = "cyan") -> None:
        self.console.print(f"[bold {style}]→[/] {message}")

    def success(self, result: ConversionResult) -> None:
        summary = result.summary
        lines = [
            f"Wrote [bold green]{result.destination}[/]",
            f"{summary.columns} timestep(s) x {len(result.index_plan.spatial_order)} point(s)",
            f"Fields: {', '.join(summary.streamed_fields)}",
        ]
        if summary.allocated_fields:
            lines.append(f"[yellow]Allocated only:[/] {', '.join(summary.allocated_fields)}")
        self.console.print(Panel("\n".join(lines), title="Conversion complete", style="green"))

    def hint(self, options: ConvertOptions) -> None:
        self.console.print(
            Panel(
                f"[bold yellow]Re-run with[/]: {options.command_hint()}",
                title="Command",
                style="bright_yellow",
            )
        )

    def wrap_error(self, error: Exception, options: ConvertOptions | None = None) -> None:
        self.console.print(
            Panel(
                f"[bold red]{error.__class__.__name__} happened:[/]\n{error}",
                title="Conversion failed",
                style="bright_red",
            )
        )
        if options:
            self.hint(options)

    def catalogue(self, source: str, metadata: SimulationMetadata) -> None:
        table = Table(title=source)
        table.add_column("Index", justify="right")
        table.add_column("Parameter")
        table.add_column("Unit")
        for param in metadata.parameters:
            table.add_row(str(param.index), param.name, param.unit or "")
        self.console.print(table)
        self.console.print(
            f"{metadata.num_points} points, {metadata.num_timesteps} timesteps"
            + (f", starting {metadata.start_time}" if metadata.start_time else "")
        )
