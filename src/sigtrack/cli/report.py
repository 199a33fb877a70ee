"""Report CLI command -- summarize saved snapshots as a coverage timeline."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..report import CoveragePoint, coverage_series, sparkline, trend_per_30_days
from ..storage import SnapshotStore
from . import app
from ._common import console, data_dir, fail, project_root, resolve_config
from .progress import format_date

_METRICS = (
    ("typed_files_pct", "Typed files"),
    ("sigs_pct", "Sigs"),
    ("typed_calls_pct", "Typed calls"),
)


@app.command()
def report(
    ctx: typer.Context,
    data: Optional[Path] = typer.Option(
        None,
        "--data",
        "-d",
        help="Directory holding snapshot JSON files (default: sigtrack_data)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the coverage series as JSON",
    ),
):
    """
    Show how type coverage evolved across saved snapshots.

    Reads every snapshot in the data directory, orders them by commit
    date, and prints coverage percentages with a trend per 30 days.

    [bold cyan]Examples:[/bold cyan]

      sigtrack report

      sigtrack report --data ./sigtrack_data --json
    """
    directory = data if data is not None else data_dir(project_root(ctx), resolve_config(ctx))
    store = SnapshotStore(directory)

    if not store.record_files():
        fail(
            f"No snapshot files found in {escape(str(directory))}",
            hint="Collect some with `sigtrack timeline --save` or `sigtrack snapshot --save`.",
        )

    loaded = store.load_all()
    for path, reason in loaded.skipped:
        console.print(f"[yellow]Skipped {escape(path.name)}:[/yellow] {escape(reason)}")

    if not loaded.snapshots:
        fail(f"No usable snapshots in {escape(str(directory))}")

    points = coverage_series(loaded.snapshots)

    # ── JSON output ───────────────────────────────────────────────────
    if json_output:
        print(
            json.dumps(
                {
                    "points": [p.to_dict() for p in points],
                    "trend_per_30_days": {
                        metric: trend_per_30_days(points, metric) for metric, _ in _METRICS
                    },
                    "skipped": [
                        {"file": str(path), "reason": reason} for path, reason in loaded.skipped
                    ],
                },
                indent=2,
            )
        )
        return

    # ── Rich output ───────────────────────────────────────────────────
    console.print()
    console.print(
        f"[bold cyan]Coverage timeline:[/bold cyan] {len(points)} snapshots "
        f"from {format_date(points[0].commit_timestamp)} "
        f"to {format_date(points[-1].commit_timestamp)}"
    )
    console.print()
    console.print(_points_table(points))
    console.print()

    for metric, label in _METRICS:
        spark = sparkline([getattr(p, metric) for p in points])
        slope = trend_per_30_days(points, metric)
        trend_str = "[dim]n/a[/dim]" if slope is None else _format_slope(slope)
        console.print(f"  {label:<12} {spark}  {trend_str}")
    console.print()


def _points_table(points: List[CoveragePoint]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Date")
    table.add_column("Commit", style="dim", max_width=8)
    table.add_column("Files", justify="right")
    for _, label in _METRICS:
        table.add_column(f"{label} %", justify="right")

    for p in points:
        table.add_row(
            format_date(p.commit_timestamp),
            (p.commit_sha or "")[:7],
            str(p.files),
            *(_format_pct(getattr(p, metric)) for metric, _ in _METRICS),
        )
    return table


def _format_pct(value: Optional[int]) -> str:
    return "-" if value is None else f"{value}%"


def _format_slope(slope: float) -> str:
    if abs(slope) < 0.05:
        return "[dim]flat[/dim]"
    color = "green" if slope > 0 else "red"
    return f"[{color}]{slope:+.1f} pts / 30 days[/{color}]"
