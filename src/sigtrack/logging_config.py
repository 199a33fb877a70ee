"""
Logging for sigtrack.

Everything goes to stderr through rich so that warnings about skipped commits
interleave cleanly with the replay progress printed on stdout. External tools
(git, Sorbet, preparation commands) are chatty; their output is only ever
logged as a short tail, or in full at DEBUG.
"""

import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "sigtrack"

# Lines of tool output kept when a failure is reported
TAIL_LINES = 5


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route sigtrack logs to stderr, and optionally to a file.

    Args:
        verbose: DEBUG level; every git and type checker invocation is shown
            with timestamps and call sites
        quiet: ERROR level; only failed restores and crashes
        log_file: Append plain-text records here as well, at DEBUG level,
            so a long replay can be audited afterwards

    Returns:
        The ``sigtrack`` logger
    """
    level = _console_level(verbose, quiet)

    handlers: List[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            level=level,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Tool output may contain brackets; never read it as markup
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger under the ``sigtrack`` namespace.

    Args:
        name: Module name (e.g. ``__name__``); prefixed with ``sigtrack.``
              when it isn't already. None returns the root sigtrack logger.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def output_tail(output: Optional[str], lines: int = TAIL_LINES) -> str:
    """Last ``lines`` non-blank lines of a tool's output."""
    kept = [line for line in (output or "").strip().splitlines() if line.strip()]
    return "\n".join(kept[-lines:])


def log_tool_output(logger: logging.Logger, label: str, output: Optional[str]) -> None:
    """Log a tool's full output at DEBUG, one record per invocation."""
    if output and output.strip() and logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s output:\n%s", label, output.rstrip())


def _console_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING
