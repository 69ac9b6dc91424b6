"""Time-domain vibration statistics.

Two peak conventions coexist and are kept as separate functions:

* :func:`estimated_peak_from_rms` derives a sinusoidal peak from RMS
  (``rms / 0.707``).  Single-axis statistics use this one.
* :func:`true_absolute_peak` is the largest absolute sample.  The tri-axial
  overall status uses this one.

Every function returns zeros for empty input instead of dividing by a zero
length.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import Any, Final

import numpy as np

from .severity import DisplayBucket, display_bucket

SINE_RMS_FACTOR: Final[float] = 0.707
"""RMS / peak ratio of a pure sinusoid, as used for peak estimation."""

DISPLAY_SCALE_FACTOR: Final[float] = 1000.0
"""Raw ADC counts are divided by this for dashboard display figures."""


@dataclass(frozen=True, slots=True)
class VibrationStatistics:
    rms: float
    peak: float
    peak_to_peak: float

    @classmethod
    def zero(cls) -> VibrationStatistics:
        return cls(rms=0.0, peak=0.0, peak_to_peak=0.0)

    def value_of(self, metric: str) -> float:
        """Return the statistic named *metric* (``rms``, ``peak``, ``peak_to_peak``)."""
        if metric not in ("rms", "peak", "peak_to_peak"):
            raise ValueError(f"Unknown statistic {metric!r}")
        return float(getattr(self, metric))

    def to_dict(self) -> dict[str, float]:
        return {"rms": self.rms, "peak": self.peak, "peak_to_peak": self.peak_to_peak}


@dataclass(frozen=True, slots=True)
class AxisDisplaySummary:
    """Dashboard figures computed on raw ADC counts (absolute, scaled)."""

    average: float
    rms: float
    peak: float
    peak_to_peak: float
    bucket: DisplayBucket

    def to_dict(self) -> dict[str, Any]:
        return {
            "average": self.average,
            "rms": self.rms,
            "peak": self.peak,
            "peak_to_peak": self.peak_to_peak,
            "bucket": str(self.bucket),
        }


def _as_array(values: np.ndarray | list[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64).ravel()


def rms(values: np.ndarray | list[float]) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(arr))))


def triaxial_rms(rms_h: float, rms_v: float, rms_a: float) -> float:
    """Combine per-axis RMS values: ``sqrt((h² + v² + a²) / 3)``."""
    return sqrt((rms_h * rms_h + rms_v * rms_v + rms_a * rms_a) / 3.0)


def estimated_peak_from_rms(rms_value: float) -> float:
    return float(rms_value) / SINE_RMS_FACTOR


def true_absolute_peak(values: np.ndarray | list[float]) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.max(np.abs(arr)))


def peak_to_peak(peak: float) -> float:
    return 2.0 * float(peak)


def vibration_statistics(values: np.ndarray | list[float]) -> VibrationStatistics:
    """RMS, RMS-estimated peak and peak-to-peak of a single-axis series."""
    arr = _as_array(values)
    if arr.size == 0:
        return VibrationStatistics.zero()
    rms_value = rms(arr)
    peak = estimated_peak_from_rms(rms_value)
    return VibrationStatistics(rms=rms_value, peak=peak, peak_to_peak=peak_to_peak(peak))


def raw_display_summary(
    raw_counts: np.ndarray | list[int],
    *,
    scale_factor: float = DISPLAY_SCALE_FACTOR,
) -> AxisDisplaySummary:
    """Average / RMS / peak / peak-to-peak of ``|adc|`` scaled by *scale_factor*.

    Peak-to-peak here is ``max(|adc|) - min(|adc|)``.  The display bucket is
    taken from the scaled average.
    """
    arr = np.abs(_as_array(raw_counts))
    if arr.size == 0:
        return AxisDisplaySummary(
            average=0.0, rms=0.0, peak=0.0, peak_to_peak=0.0, bucket=DisplayBucket.LOW
        )
    average = float(np.mean(arr)) / scale_factor
    hi = float(np.max(arr))
    lo = float(np.min(arr))
    return AxisDisplaySummary(
        average=average,
        rms=rms(arr) / scale_factor,
        peak=hi / scale_factor,
        peak_to_peak=(hi - lo) / scale_factor,
        bucket=display_bucket(average),
    )


def scalar_reading_statistics(x_g: float, y_g: float, z_g: float) -> tuple[float, float]:
    """RMS total and absolute peak from one scalar reading per axis (in g)."""
    values = [float(x_g), float(y_g), float(z_g)]
    return triaxial_rms(*values), max(abs(v) for v in values)
