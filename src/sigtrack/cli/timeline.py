"""Timeline CLI command -- replay git history and collect a snapshot per commit."""

from typing import Optional

import click
import typer

from ..analyzer import SorbetAnalyzer
from ..exceptions import CheckoutFailed, DirtyWorkingTree, VcsError
from ..storage import SnapshotStore
from ..timeline import INTERVAL_DAYS, CommandHook, Timeline, TimelineResult
from ..vcs import GitBackend
from . import app
from ._common import (
    analyzer_options,
    console,
    data_dir,
    fail,
    fail_on,
    parse_date,
    project_root,
    require_sorbet_project,
    resolve_config,
)
from .progress import ConsoleObserver, format_date


@app.command()
def timeline(
    ctx: typer.Context,
    from_date: Optional[str] = typer.Option(
        None,
        "--from",
        help="From commit date, YYYY-MM-DD (default: when sorbet/config was added)",
    ),
    to_date: Optional[str] = typer.Option(
        None,
        "--to",
        help="To commit date, YYYY-MM-DD (default: now)",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Save each snapshot as JSON in the data directory",
    ),
    save_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: sigtrack_data)",
    ),
    prepare: Optional[str] = typer.Option(
        None,
        "--prepare",
        help="Command to run after each checkout, e.g. 'bundle install'",
    ),
    bundle_install: bool = typer.Option(
        False,
        "--bundle-install",
        help="Run `bundle install` after each checkout",
    ),
    sorbet: Optional[str] = typer.Option(
        None,
        "--sorbet",
        help="Path to a custom Sorbet binary",
    ),
    interval: Optional[str] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Replay every commit, or one per day/week/month",
        click_type=click.Choice(list(INTERVAL_DAYS), case_sensitive=False),
    ),
    quiet_snapshots: bool = typer.Option(
        False,
        "--brief",
        help="Don't print metrics for each commit",
    ),
):
    """
    Replay the project's history and collect metrics at each commit.

    Checks out every commit in the range, runs Sorbet, and restores the
    branch you were on afterwards, even if the run is interrupted.
    Requires a clean working tree.

    [bold cyan]Examples:[/bold cyan]

      sigtrack timeline --save

      sigtrack timeline --from 2024-01-01 --to 2024-06-30 --interval weekly --save

      sigtrack timeline --bundle-install --save
    """
    root = project_root(ctx)
    if bundle_install and not prepare:
        prepare = "bundle install"
    config = resolve_config(
        ctx,
        sorbet_bin=sorbet,
        interval=interval.lower() if interval else None,
        prepare_command=prepare,
    )
    require_sorbet_project(root, config)

    start = parse_date(from_date, "--from")
    end = parse_date(to_date, "--to", end_of_day=True)

    store = SnapshotStore(data_dir(root, config, save_dir)) if save else None
    hook = (
        CommandHook(config.prepare_command, timeout_seconds=config.prepare_timeout_seconds)
        if config.prepare_command
        else None
    )
    engine = Timeline(
        root,
        GitBackend(timeout_seconds=config.git_timeout_seconds),
        SorbetAnalyzer(config_file=config.sorbet_config),
        options=analyzer_options(config),
        store=store,
        hook=hook,
        observer=ConsoleObserver(console, show_snapshots=not quiet_snapshots),
        interval=config.interval,
        config_file=config.sorbet_config,
    )

    try:
        result = engine.run(start, end)
    except DirtyWorkingTree as e:
        fail_on(
            e,
            hint="sigtrack needs to checkout your previous commits to build the timeline.\n"
            "Please `git commit` or `git stash` your changes then try again.",
        )
    except CheckoutFailed as e:
        fail_on(e, hint="The original ref was restored where possible; check `git status`.")
    except VcsError as e:
        fail_on(
            e, hint="sigtrack needs to checkout your previous commits to build the timeline."
        )

    if result.nothing_to_do:
        fail(
            f"No commits to replay between {format_date(result.start)} and "
            f"{format_date(result.end)}",
            hint="Try different --from and --to options.",
        )

    _print_summary(result)


def _print_summary(result: TimelineResult) -> None:
    console.print(
        f"\n[green]Done![/green] {len(result.snapshots)} snapshots from "
        f"{len(result.ticks)} commits"
    )
    if result.skipped:
        console.print(f"[yellow]{len(result.skipped)} commits skipped:[/yellow]")
        for skipped in result.skipped:
            reason = skipped.reason.splitlines()[0]
            console.print(f"  {skipped.tick.sha[:8]} ({skipped.stage}): {reason}", markup=False)
    if result.saved:
        console.print("[dim]View with: sigtrack report[/dim]")
