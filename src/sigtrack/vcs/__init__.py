"""Source control adapters -- the only code that touches repository state."""

from .base import SourceControl, Tick
from .git import GitBackend

__all__ = ["GitBackend", "SourceControl", "Tick"]
