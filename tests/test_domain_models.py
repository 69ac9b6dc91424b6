from __future__ import annotations

import numpy as np
import pytest

from vibeanalysis.domain_models import (
    AnalysisSettings,
    Axis,
    CalibrationConfig,
    SampleBatch,
    SeverityThresholds,
    Spectrum,
    TimeSeries,
    Unit,
)
from vibeanalysis.errors import InvalidInputError


class TestAxis:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("h", Axis.H),
            ("x", Axis.H),
            ("V", Axis.V),
            ("y", Axis.V),
            ("A-axis", Axis.A),
            ("z", Axis.A),
        ],
    )
    def test_parse(self, text: str, expected: Axis) -> None:
        assert Axis.parse(text) is expected

    def test_unknown_axis(self) -> None:
        with pytest.raises(InvalidInputError, match="Unknown axis"):
            Axis.parse("w")

    def test_label(self) -> None:
        assert Axis.V.label == "V-axis"


class TestUnit:
    def test_parse_value_and_label(self) -> None:
        assert Unit.parse("velocity_mm_s") is Unit.VELOCITY_MM_S
        assert Unit.parse("Velocity (mm/s)") is Unit.VELOCITY_MM_S
        assert Unit.parse("Acceleration (mm/s²)") is Unit.ACCELERATION_MM_S2

    def test_unknown_unit(self) -> None:
        with pytest.raises(InvalidInputError, match="Unknown unit"):
            Unit.parse("furlongs")


class TestCalibrationConfig:
    def test_defaults(self) -> None:
        cfg = CalibrationConfig()
        assert cfg.adc_offset == 512
        assert cfg.g_range == 2
        assert cfg.sampling_rate_hz == 50.0
        assert cfg.sensitivity == 17367

    def test_unknown_range_uses_fallback_sensitivity(self) -> None:
        assert CalibrationConfig(g_range=3).sensitivity == 17367

    def test_non_positive_rate_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="sampling_rate_hz"):
            CalibrationConfig(sampling_rate_hz=0.0)


class TestSampleBatch:
    def test_valid_batch(self) -> None:
        batch = SampleBatch(h=[512, 513], v=[510, 511], a=[500, 520], sampling_rate_hz=100)
        assert len(batch) == 2
        assert batch.sampling_rate_hz == 100.0
        np.testing.assert_array_equal(batch.axis("v"), [510, 511])
        np.testing.assert_array_equal(batch.axis(Axis.A), [500, 520])

    def test_unequal_lengths_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="equal length"):
            SampleBatch(h=[1, 2, 3], v=[1, 2], a=[1, 2, 3])

    def test_empty_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="at least one sample"):
            SampleBatch(h=[], v=[], a=[])

    @pytest.mark.parametrize("rate", [0, -1.0, float("nan"), "fast"])
    def test_bad_sampling_rate_rejected(self, rate: object) -> None:
        with pytest.raises(InvalidInputError, match="sampling_rate_hz"):
            SampleBatch(h=[1], v=[1], a=[1], sampling_rate_hz=rate)  # type: ignore[arg-type]

    def test_fractional_counts_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="integer ADC counts"):
            SampleBatch(h=[512.5], v=[512], a=[512])

    def test_integral_floats_accepted(self) -> None:
        batch = SampleBatch(h=np.array([512.0, 600.0]), v=[1, 2], a=[3, 4])
        assert batch.h.dtype == np.int64

    def test_arrays_are_read_only_copies(self) -> None:
        source = np.array([512, 600])
        batch = SampleBatch(h=source, v=[1, 2], a=[3, 4])
        source[0] = 0
        assert batch.h[0] == 512
        with pytest.raises(ValueError):
            batch.h[0] = 1

    def test_calibration_follows_batch(self) -> None:
        batch = SampleBatch(h=[1], v=[1], a=[1], sampling_rate_hz=25.0, g_range=8)
        cfg = batch.calibration(adc_offset=500)
        assert (cfg.adc_offset, cfg.g_range, cfg.sampling_rate_hz) == (500, 8, 25.0)

    def test_nested_axis_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="flat sequence"):
            SampleBatch(h=[[512, 600], [512, 600]], v=[512, 512], a=[512, 512])

    def test_scalar_axis_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="flat sequence"):
            SampleBatch(h=512, v=[512], a=[512])  # type: ignore[arg-type]

    def test_ragged_axis_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="h"):
            SampleBatch(h=[[512], [512, 600]], v=[512, 512], a=[512, 512])


class TestTimeSeries:
    def test_time_axis(self) -> None:
        series = TimeSeries(values=[0.0, 1.0, 2.0], sampling_rate_hz=50.0, unit=Unit.ACCELERATION_G)
        assert series.dt == pytest.approx(0.02)
        np.testing.assert_allclose(series.time_s(), [0.0, 0.02, 0.04])

    def test_to_dict(self) -> None:
        data = TimeSeries(values=[1.5], sampling_rate_hz=10.0, unit=Unit.VELOCITY_MM_S).to_dict()
        assert data["unit"] == "velocity_mm_s"
        assert data["label"] == "Velocity (mm/s)"
        assert data["values"] == [1.5]
        assert data["time_s"] == [0.0]


class TestSpectrum:
    def test_mismatched_lengths_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            Spectrum(frequency_hz=np.zeros(3), magnitude=np.zeros(2))

    def test_empty(self) -> None:
        assert len(Spectrum.empty()) == 0


class TestSeverityThresholds:
    def test_ascending_required(self) -> None:
        with pytest.raises(InvalidInputError, match="ascending"):
            SeverityThresholds(warning=2.0, critical=1.0)

    def test_equal_allowed(self) -> None:
        assert SeverityThresholds(0.0, 0.0).critical == 0.0

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="finite"):
            SeverityThresholds(warning=float("nan"), critical=1.0)


class TestAnalysisSettings:
    def test_default_thresholds_per_unit(self) -> None:
        settings = AnalysisSettings()
        assert settings.thresholds_for(Unit.ACCELERATION_G) == SeverityThresholds(0.5, 0.8)
        assert settings.thresholds_for(Unit.VELOCITY_MM_S) == SeverityThresholds(2.8, 7.1)
        mm = settings.thresholds_for(Unit.ACCELERATION_MM_S2)
        assert mm.warning == pytest.approx(4903.325)
        assert mm.critical == pytest.approx(7845.32)

    def test_missing_unit_falls_back_to_default(self) -> None:
        settings = AnalysisSettings(unit_thresholds={})
        assert settings.thresholds_for(Unit.ACCELERATION_G) == SeverityThresholds(0.5, 0.8)

    def test_bad_metric_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="severity_metric"):
            AnalysisSettings(severity_metric="crest")

    def test_bad_top_n_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="top_n"):
            AnalysisSettings(top_n=0)

    def test_hashable_and_equal(self) -> None:
        assert hash(AnalysisSettings()) == hash(AnalysisSettings())
        assert AnalysisSettings() == AnalysisSettings()

    def test_thresholds_map_is_read_only(self) -> None:
        source = {Unit.ACCELERATION_G: SeverityThresholds(0.1, 0.2)}
        settings = AnalysisSettings(unit_thresholds=source)
        source[Unit.ACCELERATION_G] = SeverityThresholds(5.0, 6.0)
        assert settings.thresholds_for(Unit.ACCELERATION_G) == SeverityThresholds(0.1, 0.2)
        limits = SeverityThresholds(1.0, 2.0)
        with pytest.raises(TypeError):
            settings.unit_thresholds[Unit.ACCELERATION_G] = limits  # type: ignore[index]
