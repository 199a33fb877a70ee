"""Tests for the sigtrack exception hierarchy."""

from pathlib import Path

import pytest

from sigtrack.exceptions import (
    AnalysisError,
    AnalysisFailed,
    AnalyzerUnavailable,
    CheckoutFailed,
    ConfigurationError,
    DirtyWorkingTree,
    InvalidConfigError,
    MalformedSnapshotRecord,
    NoRestorePoint,
    NotARepository,
    NotASorbetProject,
    PreparationFailed,
    SigtrackError,
    StorageError,
    VcsError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error, base",
        [
            (NotARepository(Path("/x")), VcsError),
            (NoRestorePoint(Path("/x")), VcsError),
            (DirtyWorkingTree(Path("/x")), VcsError),
            (CheckoutFailed("main"), VcsError),
            (AnalyzerUnavailable("srb"), AnalysisError),
            (AnalysisFailed("crashed"), AnalysisError),
            (PreparationFailed("bundle install"), AnalysisError),
            (InvalidConfigError("interval", "hourly", "unknown"), ConfigurationError),
            (NotASorbetProject(Path("/x"), "sorbet/config"), ConfigurationError),
            (MalformedSnapshotRecord("bad"), StorageError),
        ],
    )
    def test_families(self, error, base):
        assert isinstance(error, base)
        assert isinstance(error, SigtrackError)


class TestMessages:
    def test_details_rendered(self):
        error = CheckoutFailed("main", stderr="error: pathspec 'main' did not match\n")
        assert str(error) == (
            "Failed to checkout main (ref=main, stderr=error: pathspec 'main' did not match)"
        )

    def test_plain_message_without_details(self):
        assert str(SigtrackError("boom")) == "boom"

    def test_analysis_failed_keeps_output(self):
        error = AnalysisFailed("exited with code 1", stdout="out", stderr="err", returncode=1)
        assert error.stdout == "out"
        assert error.stderr == "err"
        assert error.details["returncode"] == "1"

    def test_malformed_record_fields(self):
        error = MalformedSnapshotRecord("expected an integer", field="files", source=Path("a.json"))
        assert error.details == {
            "reason": "expected an integer",
            "field": "files",
            "source": "a.json",
        }
