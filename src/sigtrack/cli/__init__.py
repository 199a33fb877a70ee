"""CLI entry point -- registers all subcommands."""

import typer

app = typer.Typer(
    name="sigtrack",
    help="sigtrack - Sorbet type coverage snapshots and timelines",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .main import main as _main_callback  # noqa: F401, E402
from .snapshot import snapshot as _snapshot  # noqa: F401, E402
from .timeline import timeline as _timeline  # noqa: F401, E402
from .report import report as _report  # noqa: F401, E402
