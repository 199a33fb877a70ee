"""Source-control exceptions: repository detection, cleanliness, checkout.

All of these are fatal for a timeline run. The first three are raised before
the working tree is touched; ``CheckoutFailed`` can happen mid-run.
"""

from pathlib import Path
from typing import Optional

from .base import SigtrackError


class VcsError(SigtrackError):
    """Base class for source-control errors."""

    pass


class NotARepository(VcsError):
    """Raised when a path is not under version control."""

    def __init__(self, path: Path, reason: str = ""):
        details = {"path": str(path)}
        if reason:
            details["reason"] = reason
        super().__init__(f"Not a git repository: {path}", details=details)
        self.path = path
        self.reason = reason


class NoRestorePoint(VcsError):
    """Raised when neither a branch nor a HEAD commit can be determined."""

    def __init__(self, path: Path):
        super().__init__(
            f"Cannot determine the current branch or commit of {path}",
            details={"path": str(path)},
        )
        self.path = path


class DirtyWorkingTree(VcsError):
    """Raised when uncommitted changes would be clobbered by a checkout."""

    def __init__(self, path: Path):
        super().__init__(
            "Uncommitted changes in the working tree",
            details={"path": str(path), "hint": "commit or stash your changes first"},
        )
        self.path = path


class CheckoutFailed(VcsError):
    """Raised when a ref cannot be checked out."""

    def __init__(self, ref: str, stderr: Optional[str] = None):
        details = {"ref": ref}
        if stderr:
            details["stderr"] = stderr.strip()
        super().__init__(f"Failed to checkout {ref}", details=details)
        self.ref = ref
        self.stderr = stderr or ""
