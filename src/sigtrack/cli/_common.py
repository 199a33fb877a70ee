"""Shared CLI helpers."""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..analyzer import AnalyzerOptions, is_sorbet_project
from ..config import TimelineConfig, load_config
from ..exceptions import ConfigurationError, NotASorbetProject, SigtrackError

console = Console()


def project_root(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return Path(obj.get("path") or Path.cwd()).resolve()


def resolve_config(ctx: typer.Context, **overrides) -> TimelineConfig:
    """Build config from the global options plus command-specific overrides."""
    obj = ctx.obj or {}
    try:
        return load_config(
            config_file=obj.get("config_file"),
            verbose=obj.get("verbose", False),
            quiet=obj.get("quiet", False),
            **overrides,
        )
    except ConfigurationError as e:
        fail(f"Invalid configuration: {escape(str(e))}")


def analyzer_options(config: TimelineConfig) -> AnalyzerOptions:
    return AnalyzerOptions(
        include_rbi=config.include_rbi,
        sorbet_bin=config.sorbet_bin,
        timeout_seconds=config.analyzer_timeout_seconds,
    )


def data_dir(root: Path, config: TimelineConfig, override: Optional[str] = None) -> Path:
    """Data directory; relative paths are taken from the project root."""
    path = Path(override or config.data_dir)
    return path if path.is_absolute() else root / path


def require_sorbet_project(root: Path, config: TimelineConfig) -> None:
    if not is_sorbet_project(root, config.sorbet_config):
        fail_on(
            NotASorbetProject(root, config.sorbet_config),
            hint="Run sigtrack from the root of a project type checked with Sorbet, or pass -C PATH.",
        )


def parse_date(value: Optional[str], option: str, end_of_day: bool = False) -> Optional[int]:
    """Parse ``YYYY-MM-DD`` (or a full ISO datetime) to unix seconds, local time.

    A bare date used as an upper bound covers the whole day.
    """
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        fail(f"Invalid date [bold]{value}[/bold] for option {option} (expected format YYYY-MM-DD)")
    if end_of_day and len(value) == 10:
        parsed = parsed + timedelta(days=1) - timedelta(seconds=1)
    return int(parsed.timestamp())


def fail(message: str, hint: Optional[str] = None, code: int = 1):
    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"\n[dim]{hint}[/dim]")
    raise typer.Exit(code)


def fail_on(error: SigtrackError, hint: Optional[str] = None):
    fail(escape(str(error)), hint=hint)
