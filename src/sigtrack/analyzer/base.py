"""Analyzer protocol and options shared by every type checker adapter."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from ..snapshot.models import Snapshot


@dataclass(frozen=True)
class AnalyzerOptions:
    include_rbi: bool = True
    sorbet_bin: Optional[str] = None  # None = run through Bundler
    timeout_seconds: int = 600


class Analyzer(Protocol):
    """Runs a type checker against a working tree and measures it.

    Implementations raise ``AnalyzerUnavailable`` or ``AnalysisFailed``;
    they never return a partially filled snapshot for a failed run.
    """

    def collect(self, path: Path, options: AnalyzerOptions) -> Snapshot: ...
