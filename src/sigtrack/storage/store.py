"""Persist snapshots as one JSON file per commit.

Files are named after the commit sha (or the collection timestamp for
snapshots taken outside a replay), so replaying the same range again
overwrites records instead of duplicating them.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from ..exceptions import MalformedSnapshotRecord
from ..logging_config import get_logger
from ..snapshot.models import Snapshot

logger = get_logger(__name__)

RECORD_SUFFIX = ".json"


@dataclass
class LoadResult:
    """Snapshots placed on the timeline, plus the files that were not."""

    snapshots: List[Snapshot] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)  # (file, reason)

    @property
    def files_read(self) -> int:
        return len(self.snapshots) + len(self.skipped)


class SnapshotStore:
    """Directory of snapshot records."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def record_path(self, snapshot: Snapshot) -> Path:
        key = snapshot.commit_sha or str(snapshot.timestamp)
        return self.directory / f"{key}{RECORD_SUFFIX}"

    def save(self, snapshot: Snapshot) -> Path:
        """Write ``snapshot`` atomically, replacing any record with the same key."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.record_path(snapshot)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.stem}.", suffix=".tmp", dir=str(self.directory)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.to_json())
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug("Saved snapshot to %s", target)
        return target

    def record_files(self) -> List[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(p for p in self.directory.glob(f"*{RECORD_SUFFIX}") if p.is_file())

    def load(self, path: Path) -> Snapshot:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedSnapshotRecord(f"unreadable: {e}", source=Path(path))
        try:
            return Snapshot.from_json(text)
        except MalformedSnapshotRecord as e:
            raise MalformedSnapshotRecord(e.reason, field=e.field, source=Path(path))

    def load_all(self) -> LoadResult:
        """Every record that can be placed on a timeline, oldest commit first.

        A malformed file or one without ``commit_timestamp`` is reported in
        ``skipped``; it never stops the other files from loading.
        """
        result = LoadResult()
        for path in self.record_files():
            try:
                snapshot = self.load(path)
            except MalformedSnapshotRecord as e:
                logger.warning("Skipping %s: %s", path.name, e)
                result.skipped.append((path, str(e)))
                continue
            if snapshot.commit_timestamp is None:
                result.skipped.append((path, "no commit_timestamp"))
                continue
            result.snapshots.append(snapshot)

        result.snapshots.sort(key=lambda s: s.commit_timestamp)
        return result


def save_snapshot(snapshot: Snapshot, directory: Union[str, Path]) -> Path:
    return SnapshotStore(directory).save(snapshot)


def load_snapshots(directory: Union[str, Path]) -> LoadResult:
    return SnapshotStore(directory).load_all()
