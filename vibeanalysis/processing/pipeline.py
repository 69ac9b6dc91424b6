"""Per-batch analysis pipeline.

Data flows strictly forward::

    raw ADC counts ─► g ─► mm/s² ─► velocity      (per the selected unit)
                           │
                           ▼
                       spectrum ─► statistics + ranked peaks ─► severity

Every function takes its configuration explicitly and allocates its own
buffers, so concurrent calls never interfere.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import numpy as np
from vibeanalysis_core.calibration import adc_to_g_array, g_to_mm_per_s2_array
from vibeanalysis_core.severity import classify
from vibeanalysis_core.statistics import (
    raw_display_summary,
    rms,
    scalar_reading_statistics,
    triaxial_rms,
    true_absolute_peak,
)

from ..domain_models import (
    AnalysisResult,
    AnalysisSettings,
    Axis,
    AxisAnalysis,
    CalibrationConfig,
    OverallStatus,
    SampleBatch,
    SeverityThresholds,
    TimeSeries,
    Unit,
)
from ..worker_pool import WorkerPool
from .fft import compute_spectrum, dominant_frequency, extract_statistics
from .integration import integrate_velocity

LOGGER = logging.getLogger(__name__)


def convert_axis(
    raw: np.ndarray | list[int], unit: Unit | str, calibration: CalibrationConfig
) -> TimeSeries:
    """Convert raw ADC counts of one axis into a series in *unit*."""
    unit = Unit.parse(unit)
    values = adc_to_g_array(raw, calibration.g_range, offset=calibration.adc_offset)
    if unit is not Unit.ACCELERATION_G:
        values = g_to_mm_per_s2_array(values)
    if unit is Unit.VELOCITY_MM_S:
        values = integrate_velocity(values, 1.0 / calibration.sampling_rate_hz)
    return TimeSeries(values=values, sampling_rate_hz=calibration.sampling_rate_hz, unit=unit)


def resolve_thresholds(
    unit: Unit,
    settings: AnalysisSettings,
    thresholds: SeverityThresholds | None = None,
) -> SeverityThresholds:
    """Explicit per-call thresholds (e.g. a sensor alarm level) win over defaults."""
    if thresholds is not None:
        return thresholds
    return settings.thresholds_for(unit)


def analyze_axis(
    batch: SampleBatch,
    axis: Axis | str,
    unit: Unit | str,
    *,
    settings: AnalysisSettings | None = None,
    thresholds: SeverityThresholds | None = None,
) -> AxisAnalysis:
    settings = settings or AnalysisSettings()
    axis = Axis.parse(axis)
    unit = Unit.parse(unit)
    series = convert_axis(batch.axis(axis), unit, batch.calibration(settings.adc_offset))
    spectrum = compute_spectrum(
        series.values,
        series.sampling_rate_hz,
        nyquist_truncation=settings.nyquist_truncation,
    )
    stats, peaks = extract_statistics(series.values, spectrum, top_n=settings.top_n)
    limits = resolve_thresholds(unit, settings, thresholds)
    severity = classify(
        stats.value_of(settings.severity_metric), limits.warning, limits.critical
    )
    return AxisAnalysis(
        axis=axis,
        series=series,
        spectrum=spectrum,
        statistics=stats,
        true_peak=true_absolute_peak(series.values),
        peaks=tuple(peaks),
        dominant_frequency_hz=dominant_frequency(spectrum),
        severity=severity,
        severity_metric=settings.severity_metric,
        thresholds=limits,
    )


def overall_status(
    batch: SampleBatch,
    *,
    settings: AnalysisSettings | None = None,
) -> OverallStatus:
    """Tri-axial RMS and absolute peak in g, classified with the overall thresholds."""
    settings = settings or AnalysisSettings()
    per_axis_rms: list[float] = []
    peak_g = 0.0
    for axis in Axis:
        values_g = adc_to_g_array(batch.axis(axis), batch.g_range, offset=settings.adc_offset)
        per_axis_rms.append(rms(values_g))
        peak_g = max(peak_g, true_absolute_peak(values_g))
    rms_total = triaxial_rms(*per_axis_rms)
    limits = settings.overall_thresholds
    return OverallStatus(
        rms_g=rms_total,
        peak_g=peak_g,
        severity=classify(rms_total, limits.warning, limits.critical),
        thresholds=limits,
    )


def scalar_reading_status(
    x_g: float,
    y_g: float,
    z_g: float,
    *,
    settings: AnalysisSettings | None = None,
) -> OverallStatus:
    """Overall status for sensors that report one value in g per axis instead of arrays."""
    settings = settings or AnalysisSettings()
    rms_total, peak_g = scalar_reading_statistics(x_g, y_g, z_g)
    limits = settings.overall_thresholds
    return OverallStatus(
        rms_g=rms_total,
        peak_g=peak_g,
        severity=classify(rms_total, limits.warning, limits.critical),
        thresholds=limits,
    )


def analyze_batch(
    batch: SampleBatch,
    unit: Unit | str,
    *,
    settings: AnalysisSettings | None = None,
    axes: Iterable[Axis | str] | None = None,
    thresholds: SeverityThresholds | None = None,
) -> AnalysisResult:
    """Run the full pipeline on *batch* for the requested axes (all by default)."""
    settings = settings or AnalysisSettings()
    unit = Unit.parse(unit)
    selected = [Axis.parse(a) for a in axes] if axes is not None else list(Axis)
    LOGGER.debug(
        "Analyzing batch samples=%d rate=%.3fHz g_range=%d unit=%s axes=%s",
        len(batch),
        batch.sampling_rate_hz,
        batch.g_range,
        unit,
        ",".join(str(a) for a in selected),
    )
    analyses = {
        axis: analyze_axis(batch, axis, unit, settings=settings, thresholds=thresholds)
        for axis in selected
    }
    return AnalysisResult(
        unit=unit,
        sampling_rate_hz=batch.sampling_rate_hz,
        g_range=batch.g_range,
        sample_count=len(batch),
        timestamp=batch.timestamp,
        axes=analyses,
        overall=overall_status(batch, settings=settings),
        display={axis: raw_display_summary(batch.axis(axis)) for axis in Axis},
    )


def analyze_batches(
    batches: Sequence[SampleBatch],
    unit: Unit | str,
    *,
    settings: AnalysisSettings | None = None,
    pool: WorkerPool | None = None,
) -> list[AnalysisResult]:
    """Analyze independent batches, on *pool* when given; results keep input order."""
    settings = settings or AnalysisSettings()
    unit = Unit.parse(unit)

    def _run(batch: SampleBatch) -> AnalysisResult:
        return analyze_batch(batch, unit, settings=settings)

    if pool is None:
        return [_run(batch) for batch in batches]
    return pool.map_ordered(_run, batches)


class SignalAnalyzer:
    """Stateless service object bundling :class:`AnalysisSettings`.

    Holds nothing but its settings, so one instance can serve concurrent
    requests.
    """

    __slots__ = ("_settings",)

    def __init__(self, settings: AnalysisSettings | None = None) -> None:
        self._settings = settings or AnalysisSettings()

    @property
    def settings(self) -> AnalysisSettings:
        return self._settings

    def analyze(
        self,
        batch: SampleBatch,
        unit: Unit | str = Unit.ACCELERATION_G,
        *,
        axes: Iterable[Axis | str] | None = None,
        thresholds: SeverityThresholds | None = None,
    ) -> AnalysisResult:
        return analyze_batch(
            batch, unit, settings=self._settings, axes=axes, thresholds=thresholds
        )

    def analyze_many(
        self,
        batches: Sequence[SampleBatch],
        unit: Unit | str = Unit.ACCELERATION_G,
        *,
        pool: WorkerPool | None = None,
    ) -> list[AnalysisResult]:
        return analyze_batches(batches, unit, settings=self._settings, pool=pool)
