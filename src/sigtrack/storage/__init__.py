"""Snapshot storage -- one JSON record per commit in a data directory."""

from .store import LoadResult, SnapshotStore, load_snapshots, save_snapshot

__all__ = ["LoadResult", "SnapshotStore", "load_snapshots", "save_snapshot"]
