"""Exception hierarchy for sigtrack."""

from .analysis import (
    AnalysisError,
    AnalysisFailed,
    AnalyzerUnavailable,
    PreparationFailed,
)
from .base import SigtrackError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    NotASorbetProject,
)
from .storage import MalformedSnapshotRecord, StorageError
from .vcs import (
    CheckoutFailed,
    DirtyWorkingTree,
    NoRestorePoint,
    NotARepository,
    VcsError,
)

__all__ = [
    "SigtrackError",
    "AnalysisError",
    "AnalyzerUnavailable",
    "AnalysisFailed",
    "PreparationFailed",
    "ConfigurationError",
    "InvalidConfigError",
    "NotASorbetProject",
    "StorageError",
    "MalformedSnapshotRecord",
    "VcsError",
    "NotARepository",
    "NoRestorePoint",
    "DirtyWorkingTree",
    "CheckoutFailed",
]
