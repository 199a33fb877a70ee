"""
sigtrack - Sorbet type coverage over time

Runs the Sorbet type checker, records its metrics as immutable snapshots,
and replays that collection across a project's git history to build a
longitudinal dataset of typing coverage.
"""

__version__ = "0.3.0"

from .analyzer import AnalyzerOptions, SorbetAnalyzer
from .snapshot import STRICTNESSES, Snapshot, percentage
from .storage import SnapshotStore
from .timeline import Timeline, TimelineResult
from .vcs import GitBackend, Tick

__all__ = [
    "Snapshot",
    "STRICTNESSES",
    "percentage",
    "SorbetAnalyzer",
    "AnalyzerOptions",
    "GitBackend",
    "Tick",
    "SnapshotStore",
    "Timeline",
    "TimelineResult",
]
