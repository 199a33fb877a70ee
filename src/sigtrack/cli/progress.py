"""Console progress reporting for timeline replays."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from ..snapshot.models import Snapshot
from ..timeline import SkippedTick, TimelineObserver
from ..vcs import Tick
from ._display import print_snapshot


def format_date(timestamp: Optional[int]) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d")


class ConsoleObserver(TimelineObserver):
    """Print one block per commit as the replay advances."""

    def __init__(self, console: Console, show_snapshots: bool = True):
        self.console = console
        self.show_snapshots = show_snapshots

    def on_start(self, ticks: List[Tick]) -> None:
        if ticks:
            self.console.print(f"Found [bold]{len(ticks)}[/bold] commits to replay")

    def on_tick(self, index: int, total: int, tick: Tick) -> None:
        self.console.print(
            f"\n[bold][{index}/{total}][/bold] Analyzing commit [cyan]{tick.sha}[/cyan]"
            f" - {format_date(tick.timestamp)}"
        )

    def on_snapshot(self, tick: Tick, snapshot: Snapshot, saved: Optional[Path]) -> None:
        if self.show_snapshots:
            print_snapshot(self.console, snapshot, indent_level=1)
        if saved is not None:
            self.console.print(f"  [green]✓[/green] Snapshot data saved under {saved}")
        else:
            self.console.print("  [green]✓[/green] Done")

    def on_skip(self, skipped: SkippedTick) -> None:
        first_line, _, rest = skipped.reason.partition("\n")
        self.console.print(f"  [red]✗[/red] Skipped ({skipped.stage}): {escape(first_line)}")
        if rest:
            self.console.print(f"[dim]{escape(rest)}[/dim]")

    def on_restore(self, ref: str) -> None:
        self.console.print(f"\n[dim]Restored working tree to {escape(ref)}[/dim]")
