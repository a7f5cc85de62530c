"""Terminal rendering of probe results and statistics."""

from datetime import datetime
from typing import Callable

from rich.align import Align
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from pingx import __version__
from pingx.models import (
    ProbeResult,
    ProbeSpawnError,
    ProbeSuccess,
    ProbeTimeout,
    ProbeUnreachable,
    RunConfig,
    RunStatistics,
    SpeedTestResult,
)
from pingx.stats import summarize

RULE_WIDTH = 50
ORANGE = "#FFA500"


def latency_style(time_ms: float) -> str:
    """Pick the color band for a round-trip time."""
    if time_ms < 50:
        return "green"
    if time_ms < 100:
        return "yellow"
    if time_ms < 200:
        return ORANGE
    return "red"


def banner() -> Panel:
    title = Text(f"PingX v{__version__}", style="bold magenta")
    subtitle = Text("Improved ping with colors", style="bright_black")
    return Panel(
        Group(Align.center(title), Align.center(subtitle)),
        border_style="cyan",
        width=43,
    )


class ConsoleRenderer:
    """Writes human-readable ping output to a rich Console."""

    def __init__(self, console: Console | None = None, clock: Callable[[], datetime] = datetime.now):
        self.console = console if console is not None else Console(highlight=False)
        self._clock = clock

    def _rule(self):
        self.console.print(f"[cyan]{'─' * RULE_WIDTH}[/cyan]")

    def show_banner(self):
        self.console.print(banner())

    def show_header(self, config: RunConfig):
        mode = f"({config.count} packets)" if config.is_bounded else "(continuous)"
        timeout = f" with {config.timeout_seconds}s timeout" if config.timeout_seconds else ""
        self.console.print(f"[bold]Pinging[/bold] [cyan]{escape(config.target)}[/cyan] {mode}{timeout}...\n")
        if not config.is_bounded:
            self.console.print("[bright_black]Press Ctrl+C to stop...[/bright_black]\n")

    def show_result(self, result: ProbeResult, attempt: int):
        """Print one timestamped line for a finished probe.

        Args:
            result: Probe outcome
            attempt: 1-based attempt number (kept for callers that log it)
        """
        prefix = f"[bright_black]\\[{self._clock().strftime('%H:%M:%S')}][/bright_black]"

        if isinstance(result, ProbeSuccess):
            style = latency_style(result.round_trip_ms)
            self.console.print(
                f"{prefix} [{style}]●[/{style}] [bold]Reply from[/bold] [cyan]{escape(result.ip)}[/cyan]: "
                f"[bright_black]bytes=[/bright_black][white]{result.bytes_returned}[/white] "
                f"[bright_black]time=[/bright_black][{style}]{result.round_trip_ms}ms[/{style}] "
                f"[bright_black]TTL=[/bright_black][white]{result.ttl}[/white]"
            )
        elif isinstance(result, ProbeTimeout):
            self.console.print(f"{prefix} [red]●[/red] [bold red]Request timed out.[/bold red]")
        elif isinstance(result, ProbeUnreachable):
            self.console.print(f"{prefix} [red]●[/red] [bold red]Destination host unreachable.[/bold red]")
        elif isinstance(result, ProbeSpawnError):
            self.console.print(f"[red]Error:[/red] {escape(result.message)}")
        else:
            self.console.print(f"{prefix} [red]●[/red] [bold red]Ping failed.[/bold red]")

    def show_statistics(self, stats: RunStatistics, target: str):
        summary = summarize(stats)

        self.console.print()
        self._rule()
        self.console.print(f"[bold white]Ping Statistics for [/bold white][cyan]{escape(target)}[/cyan]:")
        self.console.print(
            f"[bright_black]  Packets: Sent = {summary.sent}, Received = {summary.received}, "
            f"Lost = {summary.lost} ({summary.loss_percent:.1f}% loss)[/bright_black]"
        )

        if summary.has_latency:
            self.console.print("[bright_black]Approximate round trip times in milli-seconds:[/bright_black]")
            self.console.print(
                f"[bright_black]  Minimum = [{latency_style(summary.min_ms)}]{summary.min_ms}ms[/], "
                f"Maximum = [{latency_style(summary.max_ms)}]{summary.max_ms}ms[/], "
                f"Average = [{latency_style(summary.avg_ms)}]{summary.avg_ms:.1f}ms[/][/bright_black]"
            )
        self._rule()

    def show_speed_test(self, result: SpeedTestResult):
        self.console.print()
        self._rule()
        self.console.print("[bold white]Speed Test Results:[/bold white]")
        self.console.print(f"[bright_black]  Download: [green]{result.download_mbps:.2f}[/green] Mbps[/bright_black]")
        self.console.print(f"[bright_black]  Upload:   [green]{result.upload_mbps:.2f}[/green] Mbps[/bright_black]")
        self._rule()

    def show_speed_test_error(self, message: str):
        self.console.print(f"[red]Speed test failed:[/red] {escape(message)}")

    def show_error(self, message: str):
        self.console.print(f"[red]Error: {escape(message)}[/red]")
