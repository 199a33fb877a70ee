"""Timeline replay -- collect a snapshot at each commit of a history range."""

from .engine import Timeline, TimelineObserver
from .hooks import CommandHook, HookResult, PreparationHook, isolated_env
from .models import (
    INTERVAL_DAYS,
    SkippedTick,
    TimelineResult,
    TimelineState,
    sample_ticks,
)

__all__ = [
    "Timeline",
    "TimelineObserver",
    "TimelineResult",
    "TimelineState",
    "SkippedTick",
    "CommandHook",
    "HookResult",
    "PreparationHook",
    "INTERVAL_DAYS",
    "isolated_env",
    "sample_ticks",
]
