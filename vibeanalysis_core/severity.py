from __future__ import annotations

from enum import StrEnum
from typing import Final


class SeverityLevel(StrEnum):
    """Alarm severity of a vibration statistic."""

    NORMAL = "Normal"
    WARNING = "Warning"
    CRITICAL = "Critical"


class DisplayBucket(StrEnum):
    """Card/table colour bucket, independent of alarm severity."""

    LOW = "Low"
    MED = "Med"
    HIGH = "High"


# Fixed trip points for display colouring (values in g).
MIN_THRESHOLD: Final[float] = 0.5
MAX_THRESHOLD: Final[float] = 0.8

_SEVERITY_RANK: dict[SeverityLevel, int] = {
    level: i for i, level in enumerate(SeverityLevel)
}


def classify(value: float, warn_threshold: float, crit_threshold: float) -> SeverityLevel:
    """Classify *value* against two ascending thresholds.

    Both thresholds are strict: a value equal to a threshold stays in the
    lower level.  The caller owns threshold selection; there are no defaults
    here.
    """
    if value > crit_threshold:
        return SeverityLevel.CRITICAL
    if value > warn_threshold:
        return SeverityLevel.WARNING
    return SeverityLevel.NORMAL


def display_bucket(value: float) -> DisplayBucket:
    """Return the presentation bucket for *value* using the fixed trip points."""
    if value > MAX_THRESHOLD:
        return DisplayBucket.HIGH
    if value > MIN_THRESHOLD:
        return DisplayBucket.MED
    return DisplayBucket.LOW


def severity_rank(level: SeverityLevel | str) -> int:
    """Return the ordinal rank (0-based) of a severity level, or -1 if unknown."""
    try:
        return _SEVERITY_RANK[SeverityLevel(level)]
    except ValueError:
        return -1


def worst_severity(levels: list[SeverityLevel]) -> SeverityLevel:
    if not levels:
        return SeverityLevel.NORMAL
    return max(levels, key=severity_rank)
