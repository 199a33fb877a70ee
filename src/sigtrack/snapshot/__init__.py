"""Snapshot records -- one type coverage measurement per commit."""

from .models import STRICTNESSES, TYPED_STRICTNESSES, Snapshot, percentage

__all__ = ["Snapshot", "STRICTNESSES", "TYPED_STRICTNESSES", "percentage"]
