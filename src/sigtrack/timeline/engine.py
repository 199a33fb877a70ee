"""Replay a repository's history and collect one snapshot per commit.

The engine owns the working tree for the duration of a run:

    validate (ref to restore, clean tree)
      -> enumerate ticks
      -> for each tick: checkout, prepare, analyze, stamp, save
      -> restore the original ref

Restoring happens on every exit path, including KeyboardInterrupt. A
commit that can't be prepared or analyzed is skipped and reported; only
repository-level failures (not a repo, dirty tree, checkout failure) stop
the run.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from ..analyzer.base import Analyzer, AnalyzerOptions
from ..analyzer.sorbet import CONFIG_FILE
from ..exceptions import AnalysisError, DirtyWorkingTree, PreparationFailed, VcsError
from ..logging_config import get_logger, output_tail
from ..snapshot.models import Snapshot
from ..storage.store import SnapshotStore
from ..vcs.base import SourceControl, Tick
from .hooks import PreparationHook
from .models import SkippedTick, TimelineResult, TimelineState, sample_ticks

logger = get_logger(__name__)


class TimelineObserver:
    """Progress callbacks. The default implementation does nothing."""

    def on_start(self, ticks: List[Tick]) -> None:
        pass

    def on_tick(self, index: int, total: int, tick: Tick) -> None:
        pass

    def on_snapshot(self, tick: Tick, snapshot: Snapshot, saved: Optional[Path]) -> None:
        pass

    def on_skip(self, skipped: SkippedTick) -> None:
        pass

    def on_restore(self, ref: str) -> None:
        pass


class Timeline:
    """Drive checkout -> prepare -> analyze -> save over a range of commits."""

    def __init__(
        self,
        path: Path,
        scm: SourceControl,
        analyzer: Analyzer,
        *,
        options: Optional[AnalyzerOptions] = None,
        store: Optional[SnapshotStore] = None,
        hook: Optional[PreparationHook] = None,
        observer: Optional[TimelineObserver] = None,
        interval: str = "all",
        config_file: str = CONFIG_FILE,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.scm = scm
        self.analyzer = analyzer
        self.options = options or AnalyzerOptions()
        self.store = store
        self.hook = hook
        self.observer = observer or TimelineObserver()
        self.interval = interval
        self.config_file = config_file
        self.clock = clock
        self.state = TimelineState.IDLE

    def run(self, start: Optional[int] = None, end: Optional[int] = None) -> TimelineResult:
        """Replay commits between ``start`` and ``end`` (unix seconds, inclusive).

        ``start`` defaults to the commit that introduced the Sorbet config,
        ``end`` to now.

        Raises:
            NotARepository, NoRestorePoint, DirtyWorkingTree: before any checkout.
            CheckoutFailed: mid-run; the original ref is restored first.
        """
        original_ref = self._validate()
        result = TimelineResult(original_ref=original_ref, start=start or 0, end=end or 0)

        with self._restore_point(original_ref, result):
            self.state = TimelineState.ENUMERATING
            result.start, result.end = self._resolve_range(start, end)
            result.ticks = self.ticks(result.start, result.end)
            self.observer.on_start(result.ticks)
            if result.nothing_to_do:
                logger.info("No commits between %d and %d", result.start, result.end)

            self.state = TimelineState.REPLAYING
            total = len(result.ticks)
            for index, tick in enumerate(result.ticks, 1):
                self.observer.on_tick(index, total, tick)
                self._replay(tick, result)

        self.state = TimelineState.DONE
        result.state = self.state
        return result

    def ticks(self, start: int, end: int) -> List[Tick]:
        ticks = self.scm.commits_in_range(self.path, start, end)
        return sample_ticks(ticks, self.interval)

    # ── States ───────────────────────────────────────────────────────

    def _validate(self) -> str:
        self.state = TimelineState.VALIDATING
        try:
            ref = self.scm.current_ref(self.path)
            if not self.scm.is_working_tree_clean(self.path):
                raise DirtyWorkingTree(self.path)
        except VcsError:
            self.state = TimelineState.FAILED
            raise
        return ref

    def _resolve_range(self, start: Optional[int], end: Optional[int]) -> Tuple[int, int]:
        if end is None:
            end = int(self.clock())
        if start is None:
            start = 0
            sha = self.scm.intro_commit(self.path, self.config_file)
            if sha:
                start = self.scm.commit_timestamp(self.path, sha) or 0
        return start, end

    def _replay(self, tick: Tick, result: TimelineResult) -> None:
        # CheckoutFailed is fatal: we'd be measuring the wrong tree
        self.scm.checkout(self.path, tick.sha)

        try:
            if self.hook is not None:
                outcome = self.hook.prepare(self.path, tick)
                if not outcome.ok:
                    raise PreparationFailed(_hook_name(self.hook), output=outcome.output)
            snapshot = self.analyzer.collect(self.path, self.options)
        except AnalysisError as e:
            self._skip(tick, e, result)
            return

        snapshot = replace(snapshot, commit_sha=tick.sha, commit_timestamp=tick.timestamp)
        saved = self.store.save(snapshot) if self.store is not None else None
        result.snapshots.append(snapshot)
        if saved is not None:
            result.saved.append(saved)
        self.observer.on_snapshot(tick, snapshot, saved)

    def _skip(self, tick: Tick, error: AnalysisError, result: TimelineResult) -> None:
        stage = "prepare" if isinstance(error, PreparationFailed) else "analyze"
        reason = str(error)
        output = (
            getattr(error, "output", "")
            or getattr(error, "stderr", "")
            or getattr(error, "stdout", "")
        )
        tail = output_tail(output)
        if tail:
            reason = f"{reason}\n{tail}"

        skipped = SkippedTick(tick=tick, reason=reason, stage=stage)
        result.skipped.append(skipped)
        logger.warning("Skipping %s: %s", tick.sha, error)
        self.observer.on_skip(skipped)

    @contextmanager
    def _restore_point(self, ref: str, result: TimelineResult) -> Iterator[None]:
        """Check ``ref`` out again however the block exits.

        If the block is already failing, a failed restore is logged and the
        original error propagates. Otherwise the restore error is raised.
        """
        failed = True
        try:
            yield
            failed = False
        finally:
            self.state = TimelineState.RESTORING
            try:
                self.scm.checkout(self.path, ref)
            except VcsError as e:
                logger.error("Could not restore %s: %s", ref, e)
                self.state = result.state = TimelineState.FAILED
                if not failed:
                    raise
            else:
                result.restored_ref = ref
                self.observer.on_restore(ref)
                if failed:
                    self.state = result.state = TimelineState.FAILED


def _hook_name(hook: PreparationHook) -> str:
    return getattr(hook, "command", type(hook).__name__)

