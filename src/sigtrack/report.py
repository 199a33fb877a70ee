"""Coverage series and trends over a list of timeline snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from .snapshot.models import Snapshot, percentage

SECONDS_PER_30_DAYS = 30 * 86400


@dataclass(frozen=True)
class CoveragePoint:
    """Coverage percentages of one snapshot (None when there is nothing to count)."""

    commit_sha: Optional[str]
    commit_timestamp: int
    files: int
    typed_files_pct: Optional[int]
    sigs_pct: Optional[int]
    typed_calls_pct: Optional[int]

    def to_dict(self) -> Dict[str, object]:
        return {
            "commit_sha": self.commit_sha,
            "commit_timestamp": self.commit_timestamp,
            "files": self.files,
            "typed_files_pct": self.typed_files_pct,
            "sigs_pct": self.sigs_pct,
            "typed_calls_pct": self.typed_calls_pct,
        }


def coverage_point(snapshot: Snapshot) -> CoveragePoint:
    return CoveragePoint(
        commit_sha=snapshot.commit_sha,
        commit_timestamp=(
            snapshot.commit_timestamp
            if snapshot.commit_timestamp is not None
            else snapshot.timestamp
        ),
        files=snapshot.files,
        typed_files_pct=percentage(snapshot.typed_files, snapshot.files),
        sigs_pct=percentage(snapshot.methods_with_sig, snapshot.methods),
        typed_calls_pct=percentage(snapshot.calls_typed, snapshot.calls),
    )


def coverage_series(snapshots: Sequence[Snapshot]) -> List[CoveragePoint]:
    return [coverage_point(s) for s in snapshots]


def trend_per_30_days(points: Sequence[CoveragePoint], metric: str) -> Optional[float]:
    """Least-squares slope of ``metric`` in percentage points per 30 days.

    Points where the metric is undefined are ignored. Returns None with fewer
    than two usable points or when they all share one timestamp.
    """
    usable = [(p.commit_timestamp, getattr(p, metric)) for p in points]
    usable = [(t, v) for t, v in usable if v is not None]
    if len(usable) < 2:
        return None

    x = np.array([t for t, _ in usable], dtype=float)
    y = np.array([v for _, v in usable], dtype=float)
    if np.ptp(x) == 0:
        return None

    # Center x to keep polyfit well-conditioned with epoch-sized values
    slope, _intercept = np.polyfit((x - x.mean()) / SECONDS_PER_30_DAYS, y, 1)
    return float(slope)


def sparkline(values: Sequence[Optional[float]]) -> str:
    """ASCII sparkline; undefined values render as a blank."""
    blocks = " ▁▂▃▄▅▆▇█"
    present = [v for v in values if v is not None]
    if not present:
        return " " * len(values)
    mn, mx = min(present), max(present)
    out = []
    for v in values:
        if v is None:
            out.append(" ")
        elif mx == mn:
            out.append(blocks[4])
        else:
            out.append(blocks[max(1, min(8, int((v - mn) / (mx - mn) * 8)))])
    return "".join(out)
