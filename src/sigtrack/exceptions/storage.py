"""Storage exceptions: persisted snapshot records."""

from pathlib import Path
from typing import Optional

from .base import SigtrackError


class StorageError(SigtrackError):
    """Base class for snapshot storage errors."""

    pass


class MalformedSnapshotRecord(StorageError):
    """Raised when a record cannot be turned into a Snapshot."""

    def __init__(self, reason: str, field: Optional[str] = None, source: Optional[Path] = None):
        details = {"reason": reason}
        if field:
            details["field"] = field
        if source:
            details["source"] = str(source)
        super().__init__("Malformed snapshot record", details=details)
        self.reason = reason
        self.field = field
        self.source = source
