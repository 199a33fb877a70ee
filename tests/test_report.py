"""Tests for coverage series, trends and sparklines."""

import pytest

from sigtrack.report import (
    SECONDS_PER_30_DAYS,
    coverage_point,
    coverage_series,
    sparkline,
    trend_per_30_days,
)
from sigtrack.snapshot.models import Snapshot


def _snap(ts, with_sig, without_sig, typed_calls=0, untyped_calls=0, sigils=None, files=10):
    return Snapshot(
        timestamp=ts,
        commit_sha=f"sha{ts}",
        commit_timestamp=ts,
        files=files,
        methods_with_sig=with_sig,
        methods_without_sig=without_sig,
        calls_typed=typed_calls,
        calls_untyped=untyped_calls,
        sigils=sigils or {},
    )


class TestCoveragePoint:
    def test_percentages(self):
        snap = _snap(100, 3, 1, typed_calls=9, untyped_calls=1, sigils={"true": 4, "false": 6})
        point = coverage_point(snap)
        assert point.sigs_pct == 75
        assert point.typed_calls_pct == 90
        assert point.typed_files_pct == 40
        assert point.commit_sha == "sha100"

    def test_undefined_percentages(self):
        point = coverage_point(_snap(100, 0, 0, files=0))
        assert point.sigs_pct is None
        assert point.typed_calls_pct is None
        assert point.typed_files_pct is None

    def test_falls_back_to_collection_time(self):
        point = coverage_point(Snapshot(timestamp=77))
        assert point.commit_timestamp == 77

    def test_to_dict(self):
        d = coverage_point(_snap(100, 1, 1)).to_dict()
        assert d["sigs_pct"] == 50
        assert set(d) == {
            "commit_sha",
            "commit_timestamp",
            "files",
            "typed_files_pct",
            "sigs_pct",
            "typed_calls_pct",
        }


class TestTrend:
    def test_linear_growth(self):
        step = SECONDS_PER_30_DAYS
        points = coverage_series(
            [_snap(1_600_000_000 + i * step, 10 * i, 100 - 10 * i) for i in range(4)]
        )
        assert trend_per_30_days(points, "sigs_pct") == pytest.approx(10.0)

    def test_decline(self):
        step = SECONDS_PER_30_DAYS
        points = coverage_series([_snap(0, 8, 2), _snap(step, 6, 4)])
        assert trend_per_30_days(points, "sigs_pct") == pytest.approx(-20.0)

    def test_needs_two_points(self):
        points = coverage_series([_snap(100, 1, 1)])
        assert trend_per_30_days(points, "sigs_pct") is None

    def test_ignores_undefined_values(self):
        points = coverage_series([_snap(100, 1, 1), _snap(200, 0, 0)])
        assert trend_per_30_days(points, "sigs_pct") is None

    def test_same_timestamp(self):
        points = coverage_series([_snap(100, 1, 1), _snap(100, 2, 0)])
        assert trend_per_30_days(points, "sigs_pct") is None


class TestSparkline:
    def test_scales_between_min_and_max(self):
        line = sparkline([0, 50, 100])
        assert len(line) == 3
        assert line[0] == "▁"
        assert line[-1] == "█"

    def test_constant_values(self):
        assert sparkline([5, 5, 5]) == "▄▄▄"

    def test_undefined_values_blank(self):
        assert sparkline([None, 1, 2]) == " ▁█"

    def test_all_undefined(self):
        assert sparkline([None, None]) == "  "
