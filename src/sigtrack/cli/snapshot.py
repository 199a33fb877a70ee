"""Snapshot CLI command -- run Sorbet once and show its metrics."""

from dataclasses import replace
from typing import Optional

import typer

from ..analyzer import SorbetAnalyzer
from ..exceptions import AnalysisError
from ..storage import SnapshotStore
from ..vcs import GitBackend
from . import app
from ._common import (
    analyzer_options,
    console,
    data_dir,
    fail_on,
    project_root,
    require_sorbet_project,
    resolve_config,
)
from ._display import print_snapshot


@app.command()
def snapshot(
    ctx: typer.Context,
    save: bool = typer.Option(
        False,
        "--save",
        help="Save the snapshot as JSON in the data directory",
    ),
    save_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: sigtrack_data)",
    ),
    rbi: Optional[bool] = typer.Option(
        None,
        "--rbi/--no-rbi",
        help="Include RBI files in metrics",
    ),
    sorbet: Optional[str] = typer.Option(
        None,
        "--sorbet",
        help="Path to a custom Sorbet binary",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Run Sorbet and display type coverage metrics for the current tree.

    [bold cyan]Examples:[/bold cyan]

      sigtrack snapshot

      sigtrack snapshot --no-rbi --save

      sigtrack snapshot --sorbet ./bin/sorbet --json
    """
    root = project_root(ctx)
    config = resolve_config(ctx, sorbet_bin=sorbet, include_rbi=rbi)
    require_sorbet_project(root, config)

    analyzer = SorbetAnalyzer(config_file=config.sorbet_config)
    try:
        snap = analyzer.collect(root, analyzer_options(config))
    except AnalysisError as e:
        fail_on(e, hint="Re-run with --verbose to see the type checker command and its output.")

    scm = GitBackend(timeout_seconds=config.git_timeout_seconds)
    if scm.is_repository(root):
        sha = scm.last_commit(root)
        if sha:
            snap = replace(snap, commit_sha=sha, commit_timestamp=scm.commit_timestamp(root, sha))

    if json_output:
        print(snap.to_json(indent=2))
    else:
        console.print()
        print_snapshot(console, snap)

    if save:
        target = SnapshotStore(data_dir(root, config, save_dir)).save(snap)
        if not json_output:
            console.print(f"\n[green]Snapshot data saved under[/green] {target}")
