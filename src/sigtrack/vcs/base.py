"""Source-control protocol consumed by the timeline engine."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol


@dataclass(frozen=True)
class Tick:
    """One commit to replay."""

    sha: str
    timestamp: int  # unix seconds, committer date


class SourceControl(Protocol):
    """Primitives the timeline engine needs from a version control system.

    Only ``checkout`` mutates the working tree.
    """

    def current_ref(self, path: Path) -> str: ...

    def is_working_tree_clean(self, path: Path) -> bool: ...

    def commits_in_range(self, path: Path, start: int, end: int) -> list[Tick]: ...

    def checkout(self, path: Path, ref: str) -> None: ...

    def intro_commit(self, path: Path, file: str) -> Optional[str]: ...

    def commit_timestamp(self, path: Path, sha: str) -> Optional[int]: ...
