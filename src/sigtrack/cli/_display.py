"""Terminal rendering of a single snapshot."""

from typing import List, Mapping

from rich.console import Console

from ..snapshot.models import Snapshot, percentage


def snapshot_lines(snapshot: Snapshot, indent_level: int = 0) -> List[str]:
    """Rich-markup lines describing ``snapshot``.

    Zero-valued rows are left out of the breakdowns.
    """
    pad = "  " * indent_level
    lines: List[str] = []

    if snapshot.version_static or snapshot.version_runtime:
        if snapshot.version_static:
            lines.append(f"Sorbet static: [green]{snapshot.version_static}[/green]")
        if snapshot.version_runtime:
            lines.append(f"Sorbet runtime: [green]{snapshot.version_runtime}[/green]")
        lines.append("")

    lines.append("[bold]Content:[/bold]")
    lines.append(f"  files: {snapshot.files} (including {snapshot.rbi_files} RBIs)")
    lines.append(f"  modules: {snapshot.modules}")
    # Sorbet counts every singleton class as a class too
    lines.append(f"  classes: {max(0, snapshot.classes - snapshot.singleton_classes)}")
    lines.append(f"  methods: {snapshot.methods}")
    lines.append("")

    lines.append("[bold]Sigils:[/bold]")
    lines.extend(_breakdown(snapshot.sigils, snapshot.files))
    lines.append("")

    lines.append("[bold]Methods:[/bold]")
    lines.extend(
        _breakdown(
            {
                "with signature": snapshot.methods_with_sig,
                "without signature": snapshot.methods_without_sig,
            },
            snapshot.methods,
        )
    )
    lines.append("")

    lines.append("[bold]Calls:[/bold]")
    lines.extend(
        _breakdown(
            {"typed": snapshot.calls_typed, "untyped": snapshot.calls_untyped},
            snapshot.calls,
        )
    )

    return [f"{pad}{line}" if line else line for line in lines]


def print_snapshot(console: Console, snapshot: Snapshot, indent_level: int = 0) -> None:
    for line in snapshot_lines(snapshot, indent_level=indent_level):
        console.print(line, highlight=False)


def _breakdown(counts: Mapping[str, int], total: int) -> List[str]:
    rows = []
    for key, value in counts.items():
        if value <= 0:
            continue
        pct = percentage(value, total)
        suffix = f" ({pct}%)" if pct is not None else ""
        rows.append(f"  {key}: {value}{suffix}")
    return rows
