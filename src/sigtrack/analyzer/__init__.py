"""Type checker adapters -- run Sorbet and measure what it reports."""

from .base import Analyzer, AnalyzerOptions
from .sorbet import SorbetAnalyzer, is_sorbet_project
from .sorbet_config import SorbetConfig

__all__ = [
    "Analyzer",
    "AnalyzerOptions",
    "SorbetAnalyzer",
    "SorbetConfig",
    "is_sorbet_project",
]
