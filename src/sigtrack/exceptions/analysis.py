"""Analysis-related exceptions: the type checker and preparation steps.

These are tick-local during a timeline run: the engine records them and moves
on to the next commit.
"""

from typing import Optional

from .base import SigtrackError


class AnalysisError(SigtrackError):
    """Base class for analysis-related errors."""

    pass


class AnalyzerUnavailable(AnalysisError):
    """Raised when the type checker binary cannot be found."""

    def __init__(self, binary: str, reason: str = ""):
        details = {"binary": binary}
        if reason:
            details["reason"] = reason
        super().__init__(f"Type checker not available: {binary}", details=details)
        self.binary = binary
        self.reason = reason


class AnalysisFailed(AnalysisError):
    """Raised when the type checker ran but produced no usable metrics."""

    def __init__(
        self,
        reason: str,
        stdout: str = "",
        stderr: str = "",
        returncode: Optional[int] = None,
    ):
        details = {"reason": reason}
        if returncode is not None:
            details["returncode"] = str(returncode)
        super().__init__(f"Analysis failed: {reason}", details=details)
        self.reason = reason
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


class PreparationFailed(AnalysisError):
    """Raised when the pre-analysis hook (e.g. ``bundle install``) fails."""

    def __init__(self, command: str, output: str = ""):
        super().__init__(
            f"Preparation command failed: {command}",
            details={"command": command},
        )
        self.command = command
        self.output = output
