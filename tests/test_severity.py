from __future__ import annotations

import pytest
from vibeanalysis_core.severity import (
    MAX_THRESHOLD,
    MIN_THRESHOLD,
    DisplayBucket,
    SeverityLevel,
    classify,
    display_bucket,
    severity_rank,
    worst_severity,
)


class TestClassify:
    def test_warning(self) -> None:
        assert classify(6.0, 5.0, 8.0) is SeverityLevel.WARNING

    def test_critical(self) -> None:
        assert classify(9.0, 5.0, 8.0) is SeverityLevel.CRITICAL

    def test_normal(self) -> None:
        assert classify(1.0, 5.0, 8.0) is SeverityLevel.NORMAL

    def test_thresholds_are_strict(self) -> None:
        assert classify(5.0, 5.0, 8.0) is SeverityLevel.NORMAL
        assert classify(8.0, 5.0, 8.0) is SeverityLevel.WARNING

    @pytest.mark.parametrize(("warn", "crit"), [(0.0, 0.0), (0.0, 1.0), (0.5, 0.8)])
    def test_zero_value_is_normal_for_non_negative_thresholds(
        self, warn: float, crit: float
    ) -> None:
        assert classify(0.0, warn, crit) is SeverityLevel.NORMAL

    def test_string_values(self) -> None:
        assert str(SeverityLevel.NORMAL) == "Normal"
        assert str(SeverityLevel.WARNING) == "Warning"
        assert str(SeverityLevel.CRITICAL) == "Critical"


class TestDisplayBucket:
    def test_trip_points(self) -> None:
        assert MIN_THRESHOLD == 0.5
        assert MAX_THRESHOLD == 0.8

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0.0, DisplayBucket.LOW),
            (0.5, DisplayBucket.LOW),
            (0.51, DisplayBucket.MED),
            (0.8, DisplayBucket.MED),
            (0.81, DisplayBucket.HIGH),
        ],
    )
    def test_buckets(self, value: float, expected: DisplayBucket) -> None:
        assert display_bucket(value) is expected


class TestSeverityRank:
    def test_ordering(self) -> None:
        assert severity_rank(SeverityLevel.NORMAL) == 0
        assert severity_rank(SeverityLevel.WARNING) == 1
        assert severity_rank("Critical") == 2

    def test_unknown(self) -> None:
        assert severity_rank("Fatal") == -1

    def test_worst_severity(self) -> None:
        levels = [SeverityLevel.NORMAL, SeverityLevel.CRITICAL, SeverityLevel.WARNING]
        assert worst_severity(levels) is SeverityLevel.CRITICAL
        assert worst_severity([]) is SeverityLevel.NORMAL
