"""Domain model objects for the vibration analysis engine.

Every record is an immutable value produced by one pipeline stage and
consumed by the next.  Numpy arrays held by these records are copied on
construction and flagged read-only so no stage can mutate another stage's
output.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Any

import numpy as np
from vibeanalysis_core.calibration import sensitivity_for_range
from vibeanalysis_core.severity import SeverityLevel, worst_severity
from vibeanalysis_core.statistics import AxisDisplaySummary, VibrationStatistics

from .constants import (
    ACCEL_MM_S2_CRITICAL,
    ACCEL_MM_S2_WARNING,
    ADC_ZERO_OFFSET,
    DEFAULT_G_RANGE,
    DEFAULT_SAMPLING_RATE_HZ,
    DEFAULT_SEVERITY_METRIC,
    DEFAULT_TOP_N_PEAKS,
    OVERALL_CRITICAL_G,
    OVERALL_WARNING_G,
    SEVERITY_METRICS,
    VELOCITY_CRITICAL_MM_S,
    VELOCITY_WARNING_MM_S,
)
from .errors import InvalidInputError

__all__ = [
    "AnalysisResult",
    "AnalysisSettings",
    "Axis",
    "AxisAnalysis",
    "AxisDisplaySummary",
    "CalibrationConfig",
    "OverallStatus",
    "SampleBatch",
    "SeverityThresholds",
    "SpectralPeak",
    "Spectrum",
    "TimeSeries",
    "Unit",
    "VibrationStatistics",
]


def _readonly(values: Any, dtype: type) -> np.ndarray:
    arr = np.array(values, dtype=dtype).ravel()
    arr.flags.writeable = False
    return arr


def _as_adc_counts(values: Any, axis: str) -> np.ndarray:
    try:
        raw = np.asarray(values)
    except ValueError:
        raise InvalidInputError(f"Axis {axis!r} is not a rectangular array of ADC counts") from None
    if raw.ndim != 1:
        raise InvalidInputError(
            f"Axis {axis!r} must be a flat sequence of ADC counts, got {raw.ndim} dimensions"
        )
    if raw.size and raw.dtype.kind not in "iu":
        integral = (
            raw.dtype.kind == "f"
            and bool(np.all(np.isfinite(raw)))
            and bool(np.all(raw == np.round(raw)))
        )
        if not integral:
            raise InvalidInputError(f"Axis {axis!r} must contain integer ADC counts")
    return _readonly(raw, np.int64)


def _require_positive_rate(sampling_rate_hz: float, owner: str) -> float:
    try:
        rate = float(sampling_rate_hz)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"{owner}.sampling_rate_hz must be a number, got {sampling_rate_hz!r}"
        ) from None
    if not math.isfinite(rate) or rate <= 0:
        raise InvalidInputError(f"{owner}.sampling_rate_hz must be > 0, got {sampling_rate_hz!r}")
    return rate


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Axis(StrEnum):
    """Sensor axes: horizontal, vertical and axial."""

    H = "h"
    V = "v"
    A = "a"

    @classmethod
    def parse(cls, value: str | Axis) -> Axis:
        """Accept ``h``/``v``/``a``, payload aliases ``x``/``y``/``z`` and ``H-axis`` labels."""
        if isinstance(value, Axis):
            return value
        text = str(value).strip().lower()
        if text.endswith("-axis"):
            text = text[: -len("-axis")]
        text = _AXIS_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            raise InvalidInputError(f"Unknown axis {value!r}") from None

    @property
    def label(self) -> str:
        return f"{self.name}-axis"


_AXIS_ALIASES: dict[str, str] = {"x": "h", "y": "v", "z": "a"}


class Unit(StrEnum):
    ACCELERATION_G = "acceleration_g"
    ACCELERATION_MM_S2 = "acceleration_mm_s2"
    VELOCITY_MM_S = "velocity_mm_s"

    @classmethod
    def parse(cls, value: str | Unit) -> Unit:
        """Accept enum values or the display labels (e.g. ``"Velocity (mm/s)"``)."""
        if isinstance(value, Unit):
            return value
        text = str(value).strip()
        for unit in cls:
            if text == unit.value or text == unit.label:
                return unit
        raise InvalidInputError(f"Unknown unit {value!r}")

    @property
    def label(self) -> str:
        return _UNIT_LABELS[self]


_UNIT_LABELS: dict[Unit, str] = {
    Unit.ACCELERATION_G: "Acceleration (G)",
    Unit.ACCELERATION_MM_S2: "Acceleration (mm/s²)",
    Unit.VELOCITY_MM_S: "Velocity (mm/s)",
}


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CalibrationConfig:
    adc_offset: int = ADC_ZERO_OFFSET
    g_range: int = DEFAULT_G_RANGE
    sampling_rate_hz: float = DEFAULT_SAMPLING_RATE_HZ

    def __post_init__(self) -> None:
        rate = _require_positive_rate(self.sampling_rate_hz, "CalibrationConfig")
        object.__setattr__(self, "sampling_rate_hz", rate)

    @property
    def sensitivity(self) -> int:
        return sensitivity_for_range(self.g_range)


@dataclass(frozen=True, slots=True, eq=False)
class SampleBatch:
    """One acquisition: raw ADC counts per axis, index 0 is the earliest sample."""

    h: np.ndarray
    v: np.ndarray
    a: np.ndarray
    sampling_rate_hz: float = DEFAULT_SAMPLING_RATE_HZ
    g_range: int = DEFAULT_G_RANGE
    timestamp: datetime | None = None

    def __post_init__(self) -> None:
        for axis in Axis:
            counts = _as_adc_counts(getattr(self, axis.value), axis.value)
            object.__setattr__(self, axis.value, counts)
        lengths = {axis: int(getattr(self, axis.value).size) for axis in Axis}
        if len(set(lengths.values())) != 1:
            detail = ", ".join(f"{axis.value}={n}" for axis, n in lengths.items())
            raise InvalidInputError(f"Axis sample arrays must have equal length ({detail})")
        if lengths[Axis.H] < 1:
            raise InvalidInputError("SampleBatch needs at least one sample per axis")
        rate = _require_positive_rate(self.sampling_rate_hz, "SampleBatch")
        object.__setattr__(self, "sampling_rate_hz", rate)
        object.__setattr__(self, "g_range", int(self.g_range))

    def __len__(self) -> int:
        return int(self.h.size)

    def axis(self, axis: Axis | str) -> np.ndarray:
        return getattr(self, Axis.parse(axis).value)

    def calibration(self, adc_offset: int = ADC_ZERO_OFFSET) -> CalibrationConfig:
        return CalibrationConfig(
            adc_offset=adc_offset,
            g_range=self.g_range,
            sampling_rate_hz=self.sampling_rate_hz,
        )


# ---------------------------------------------------------------------------
# Pipeline stage outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class TimeSeries:
    values: np.ndarray
    sampling_rate_hz: float
    unit: Unit

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _readonly(self.values, np.float64))
        rate = _require_positive_rate(self.sampling_rate_hz, "TimeSeries")
        object.__setattr__(self, "sampling_rate_hz", rate)

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def dt(self) -> float:
        return 1.0 / self.sampling_rate_hz

    def time_s(self) -> np.ndarray:
        """Sample timestamps in seconds relative to the first sample."""
        return np.arange(len(self), dtype=np.float64) * self.dt

    def to_dict(self) -> dict[str, Any]:
        return {
            "unit": str(self.unit),
            "label": self.unit.label,
            "sampling_rate_hz": self.sampling_rate_hz,
            "time_s": self.time_s().tolist(),
            "values": self.values.tolist(),
        }


@dataclass(frozen=True, slots=True, eq=False)
class Spectrum:
    """One-sided magnitude spectrum; bin 0 is DC."""

    frequency_hz: np.ndarray
    magnitude: np.ndarray

    def __post_init__(self) -> None:
        freq = _readonly(self.frequency_hz, np.float64)
        mag = _readonly(self.magnitude, np.float64)
        if freq.size != mag.size:
            raise InvalidInputError(
                f"Spectrum arrays must have equal length (freq={freq.size}, mag={mag.size})"
            )
        object.__setattr__(self, "frequency_hz", freq)
        object.__setattr__(self, "magnitude", mag)

    @classmethod
    def empty(cls) -> Spectrum:
        return cls(frequency_hz=np.empty(0), magnitude=np.empty(0))

    def __len__(self) -> int:
        return int(self.magnitude.size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequency_hz": self.frequency_hz.tolist(),
            "magnitude": self.magnitude.tolist(),
        }


@dataclass(frozen=True, slots=True)
class SpectralPeak:
    frequency_hz: float
    magnitude: float
    rms: float

    def to_dict(self) -> dict[str, float]:
        return {"frequency_hz": self.frequency_hz, "magnitude": self.magnitude, "rms": self.rms}


@dataclass(frozen=True, slots=True)
class SeverityThresholds:
    warning: float
    critical: float

    def __post_init__(self) -> None:
        for name in ("warning", "critical"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidInputError(f"SeverityThresholds.{name} must be finite, got {value!r}")
        if self.warning > self.critical:
            raise InvalidInputError(
                f"SeverityThresholds must be ascending (warning={self.warning}, "
                f"critical={self.critical})"
            )

    def to_dict(self) -> dict[str, float]:
        return {"warning": float(self.warning), "critical": float(self.critical)}


@dataclass(frozen=True, slots=True, eq=False)
class AxisAnalysis:
    axis: Axis
    series: TimeSeries
    spectrum: Spectrum
    statistics: VibrationStatistics
    true_peak: float
    peaks: tuple[SpectralPeak, ...]
    dominant_frequency_hz: float | None
    severity: SeverityLevel
    severity_metric: str
    thresholds: SeverityThresholds

    @property
    def unit(self) -> Unit:
        return self.series.unit

    def to_dict(self, *, include_series: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {
            "axis": str(self.axis),
            "label": self.axis.label,
            "unit": str(self.unit),
            "statistics": self.statistics.to_dict(),
            "true_peak": self.true_peak,
            "peaks": [peak.to_dict() for peak in self.peaks],
            "dominant_frequency_hz": self.dominant_frequency_hz,
            "severity": str(self.severity),
            "severity_metric": self.severity_metric,
            "thresholds": self.thresholds.to_dict(),
        }
        if include_series:
            out["time_series"] = self.series.to_dict()
            out["spectrum"] = self.spectrum.to_dict()
        return out


@dataclass(frozen=True, slots=True)
class OverallStatus:
    """Tri-axial figures in g across H, V and A."""

    rms_g: float
    peak_g: float
    severity: SeverityLevel
    thresholds: SeverityThresholds

    def to_dict(self) -> dict[str, Any]:
        return {
            "rms_g": self.rms_g,
            "peak_g": self.peak_g,
            "severity": str(self.severity),
            "thresholds": self.thresholds.to_dict(),
        }


@dataclass(frozen=True, slots=True, eq=False)
class AnalysisResult:
    unit: Unit
    sampling_rate_hz: float
    g_range: int
    sample_count: int
    timestamp: datetime | None
    axes: Mapping[Axis, AxisAnalysis]
    overall: OverallStatus
    display: Mapping[Axis, AxisDisplaySummary]

    def __post_init__(self) -> None:
        object.__setattr__(self, "axes", MappingProxyType(dict(self.axes)))
        object.__setattr__(self, "display", MappingProxyType(dict(self.display)))

    @property
    def severity(self) -> SeverityLevel:
        """Worst severity over the analysed axes."""
        return worst_severity([analysis.severity for analysis in self.axes.values()])

    def to_dict(self, *, include_series: bool = True) -> dict[str, Any]:
        return {
            "unit": str(self.unit),
            "unit_label": self.unit.label,
            "sampling_rate_hz": self.sampling_rate_hz,
            "g_range": self.g_range,
            "sample_count": self.sample_count,
            "timestamp": self.timestamp.isoformat() if self.timestamp is not None else None,
            "axes": {
                str(axis): analysis.to_dict(include_series=include_series)
                for axis, analysis in self.axes.items()
            },
            "overall": self.overall.to_dict(),
            "display": {str(axis): summary.to_dict() for axis, summary in self.display.items()},
            "severity": str(self.severity),
        }


# ---------------------------------------------------------------------------
# Engine settings
# ---------------------------------------------------------------------------


def _default_unit_thresholds() -> dict[Unit, SeverityThresholds]:
    return {
        Unit.ACCELERATION_G: SeverityThresholds(OVERALL_WARNING_G, OVERALL_CRITICAL_G),
        Unit.ACCELERATION_MM_S2: SeverityThresholds(ACCEL_MM_S2_WARNING, ACCEL_MM_S2_CRITICAL),
        Unit.VELOCITY_MM_S: SeverityThresholds(VELOCITY_WARNING_MM_S, VELOCITY_CRITICAL_MM_S),
    }


@dataclass(frozen=True, slots=True)
class AnalysisSettings:
    """Everything the pipeline needs besides the batch itself.

    Passed explicitly on every call; the engine holds no ambient settings.
    """

    adc_offset: int = ADC_ZERO_OFFSET
    top_n: int = DEFAULT_TOP_N_PEAKS
    nyquist_truncation: bool = False
    severity_metric: str = DEFAULT_SEVERITY_METRIC
    unit_thresholds: Mapping[Unit, SeverityThresholds] = field(
        default_factory=_default_unit_thresholds, hash=False
    )
    overall_thresholds: SeverityThresholds = field(
        default_factory=lambda: SeverityThresholds(OVERALL_WARNING_G, OVERALL_CRITICAL_G)
    )

    def __post_init__(self) -> None:
        if self.severity_metric not in SEVERITY_METRICS:
            raise InvalidInputError(
                f"severity_metric must be one of {SEVERITY_METRICS}, got {self.severity_metric!r}"
            )
        if self.top_n < 1:
            raise InvalidInputError(f"top_n must be >= 1, got {self.top_n!r}")
        object.__setattr__(self, "unit_thresholds", MappingProxyType(dict(self.unit_thresholds)))

    def thresholds_for(self, unit: Unit) -> SeverityThresholds:
        try:
            return self.unit_thresholds[unit]
        except KeyError:
            return _default_unit_thresholds()[unit]
