"""Git-backed source control via subprocess."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from ..exceptions import CheckoutFailed, NoRestorePoint, NotARepository, VcsError
from ..logging_config import get_logger
from .base import Tick

logger = get_logger(__name__)


class GitBackend:
    """Run git commands against a working tree.

    Every call goes through ``git -C <path>`` with a bounded timeout, so a
    hung git process surfaces as an error instead of stalling a replay.
    """

    def __init__(self, timeout_seconds: int = 60):
        self.timeout_seconds = timeout_seconds

    # ── Queries ──────────────────────────────────────────────────────

    def is_repository(self, path: Path) -> bool:
        try:
            result = self._git(path, "rev-parse", "--git-dir")
        except VcsError:
            return False
        return result.returncode == 0

    def current_ref(self, path: Path) -> str:
        """Current branch name, or the HEAD sha when detached."""
        self._require_repository(path)

        head = self._git(path, "rev-parse", "--verify", "-q", "HEAD^{commit}")
        if head.returncode != 0 or not head.stdout.strip():
            raise NoRestorePoint(Path(path))

        branch = self._git(path, "symbolic-ref", "--short", "-q", "HEAD")
        if branch.returncode == 0 and branch.stdout.strip():
            return branch.stdout.strip()
        return head.stdout.strip()

    def is_working_tree_clean(self, path: Path) -> bool:
        """True when tracked files have no staged or unstaged changes.

        Untracked files are ignored: checkout neither needs nor touches them.
        """
        result = self._git(path, "status", "--porcelain", "--untracked-files=no")
        if result.returncode != 0:
            raise NotARepository(Path(path), reason=result.stderr.strip())
        return not result.stdout.strip()

    def commits_in_range(self, path: Path, start: int, end: int) -> list[Tick]:
        """Commits of the current history with a timestamp in ``[start, end]``.

        Returned oldest first, ordered by timestamp (ties keep git's order).
        """
        if start > end:
            return []

        result = self._git(
            path,
            "log",
            "--reverse",
            "--format=%H %ct",
            f"--since=@{start}",
            f"--until=@{end}",
        )
        if result.returncode != 0:
            logger.warning("git log failed: %s", result.stderr.strip())
            return []

        ticks = [t for t in _parse_ticks(result.stdout) if start <= t.timestamp <= end]
        return sorted(ticks, key=lambda t: t.timestamp)

    def last_commit(self, path: Path) -> Optional[str]:
        result = self._git(path, "rev-parse", "--verify", "-q", "HEAD^{commit}")
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def commit_timestamp(self, path: Path, sha: str) -> Optional[int]:
        result = self._git(path, "show", "-s", "--format=%ct", sha)
        if result.returncode != 0:
            return None
        try:
            return int(result.stdout.strip().splitlines()[-1])
        except (IndexError, ValueError):
            return None

    def intro_commit(self, path: Path, file: str) -> Optional[str]:
        """Oldest commit that added ``file``."""
        result = self._git(
            path, "log", "--reverse", "--diff-filter=A", "--format=%H", "--", file
        )
        if result.returncode != 0:
            return None
        lines = result.stdout.split()
        return lines[0] if lines else None

    # ── Mutation ─────────────────────────────────────────────────────

    def checkout(self, path: Path, ref: str) -> None:
        try:
            result = self._git(path, "checkout", "-q", ref)
        except VcsError as e:
            raise CheckoutFailed(ref, stderr=str(e))
        if result.returncode != 0:
            raise CheckoutFailed(ref, stderr=result.stderr)

    # ── Helpers ──────────────────────────────────────────────────────

    def _require_repository(self, path: Path) -> None:
        result = self._git(path, "rev-parse", "--git-dir")
        if result.returncode != 0:
            raise NotARepository(Path(path), reason=result.stderr.strip())

    def _git(self, path: Path, *args: str) -> subprocess.CompletedProcess:
        cmd = ["git", "-C", str(path), *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError:
            raise NotARepository(Path(path), reason="git executable not found")
        except subprocess.TimeoutExpired:
            raise VcsError(
                f"git {args[0]} timed out after {self.timeout_seconds}s",
                details={"path": str(path)},
            )


def _parse_ticks(raw: str) -> list[Tick]:
    ticks = []
    for line in raw.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            ticks.append(Tick(sha=parts[0], timestamp=int(parts[1])))
        except ValueError:
            logger.debug("Skipping unparseable git log line: %r", line)
    return ticks
