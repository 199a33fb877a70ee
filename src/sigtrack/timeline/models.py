"""Data models for timeline replay runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..snapshot.models import Snapshot
from ..vcs.base import Tick

# Sampling interval -> minimum days between two replayed commits (0 = every commit)
INTERVAL_DAYS = {
    "all": 0,
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
}


class TimelineState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    ENUMERATING = "enumerating"
    REPLAYING = "replaying"
    RESTORING = "restoring"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SkippedTick:
    tick: Tick
    reason: str
    stage: str  # "prepare" or "analyze"


@dataclass
class TimelineResult:
    """Summary of one replay run."""

    original_ref: str
    start: int
    end: int
    ticks: List[Tick] = field(default_factory=list)
    snapshots: List[Snapshot] = field(default_factory=list)
    saved: List[Path] = field(default_factory=list)
    skipped: List[SkippedTick] = field(default_factory=list)
    restored_ref: Optional[str] = None
    state: TimelineState = TimelineState.IDLE

    @property
    def nothing_to_do(self) -> bool:
        return not self.ticks

    @property
    def processed(self) -> int:
        return len(self.snapshots) + len(self.skipped)

    @property
    def restored(self) -> bool:
        return self.restored_ref == self.original_ref


def sample_ticks(ticks: List[Tick], interval: str = "all") -> List[Tick]:
    """Thin an oldest-first tick list to at most one commit per interval.

    Keeps the first commit, then every commit at least the interval's
    number of days after the last one kept.
    """
    try:
        days = INTERVAL_DAYS[interval]
    except KeyError:
        raise ValueError(f"Unknown interval {interval!r}") from None
    if days == 0:
        return list(ticks)

    span = days * 86400
    sampled: List[Tick] = []
    for tick in ticks:
        if not sampled or tick.timestamp - sampled[-1].timestamp >= span:
            sampled.append(tick)
    return sampled
