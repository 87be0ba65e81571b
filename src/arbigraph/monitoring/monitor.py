"""Real-time display of detected arbitrage cycles."""
from collections import deque
from datetime import datetime
from typing import Deque, Optional, Tuple
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.layout import Layout
from arbigraph.models import ArbitrageCycle, DetectionResult, NoArbitrage
from arbigraph.utils import format_path, format_percentage


class CycleMonitor:
    """Result sink that keeps recent cycles and renders a dashboard."""

    def __init__(self, console: Optional[Console] = None, history_size: int = 20):
        """Initialise monitor."""
        self.console = console or Console()
        self.latest_result: DetectionResult = NoArbitrage()
        self.history: Deque[Tuple[datetime, ArbitrageCycle]] = deque(maxlen=history_size)
        self.results_seen = 0
        self.total_cycles_found = 0
        self.start_time = datetime.now()

    def __call__(self, result: DetectionResult):
        """Record one detection result."""
        self.results_seen += 1
        self.latest_result = result
        if isinstance(result, ArbitrageCycle):
            self.total_cycles_found += 1
            self.history.appendleft((datetime.now(), result))

    def render(self, stats: dict) -> Layout:
        """Create rich dashboard layout."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="cycles", ratio=2),
            Layout(name="stats", size=12)
        )

        runtime = datetime.now() - self.start_time
        header_text = (
            f"ARBIGRAPH - Rate Graph Cycle Monitor\n"
            f"Runtime: {str(runtime).split('.')[0]} | "
            f"Cycles Found: {self.total_cycles_found}"
        )
        layout["header"].update(Panel(header_text, style="bold cyan"))

        if self.history:
            layout["cycles"].update(
                Panel(self._create_cycles_table(), title="Recent Cycles")
            )
        else:
            layout["cycles"].update(
                Panel("No arbitrage detected...", title="Recent Cycles")
            )

        layout["stats"].update(
            Panel(self._create_stats_table(stats), title="Processing Statistics")
        )
        return layout

    def _create_cycles_table(self) -> Table:
        """Create table of recent cycles."""
        table = Table(show_header=True, header_style="bold magenta")

        table.add_column("Time", style="dim")
        table.add_column("Path", style="cyan")
        table.add_column("Hops", justify="right")
        table.add_column("Profit %", justify="right")

        for seen_at, cycle in self.history:
            profit_color = "green" if cycle.profit_percentage > 1.0 else "yellow"
            table.add_row(
                seen_at.strftime("%H:%M:%S"),
                format_path(cycle.currencies),
                str(cycle.hops),
                f"[{profit_color}]{format_percentage(cycle.profit_percentage)}[/]",
            )

        return table

    def _create_stats_table(self, stats: dict) -> Table:
        """Create statistics table."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        for key, value in stats.items():
            table.add_row(key.replace("_", " ").title(), str(value))

        return table

    def print_summary(self, stats: dict):
        """Print final statistics."""
        self.console.print("\n[bold cyan]Final Statistics:[/]")
        for key, value in stats.items():
            self.console.print(f"{key.replace('_', ' ').title()}: {value}")
        self.console.print(f"Cycles Reported: {self.total_cycles_found}")
