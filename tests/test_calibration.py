from __future__ import annotations

import numpy as np
import pytest
from vibeanalysis_core.calibration import (
    ADC_ZERO_OFFSET,
    G_RANGES,
    STANDARD_GRAVITY_MM_S2,
    adc_to_g_array,
    g_to_mm_per_s2_array,
    sensitivity_for_range,
    to_accel_mm_per_s2,
    to_acceleration_g,
)


class TestSensitivity:
    @pytest.mark.parametrize(
        ("g_range", "expected"),
        [(2, 17367), (4, 8684), (8, 4342), (16, 2171)],
    )
    def test_known_ranges(self, g_range: int, expected: int) -> None:
        assert sensitivity_for_range(g_range) == expected

    def test_unknown_range_falls_back_to_2g(self) -> None:
        assert sensitivity_for_range(3) == 17367
        assert sensitivity_for_range(None) == 17367
        assert sensitivity_for_range(-8) == 17367


class TestToAccelerationG:
    def test_offset_maps_to_zero_for_every_range(self) -> None:
        for g_range in (*G_RANGES, 0, 32):
            assert to_acceleration_g(ADC_ZERO_OFFSET, g_range) == 0.0

    def test_one_g_at_2g_range(self) -> None:
        assert to_acceleration_g(512 + 17367, 2) == pytest.approx(1.0)

    def test_linear_and_monotonic(self) -> None:
        values = [to_acceleration_g(adc, 2) for adc in range(0, 1025, 64)]
        diffs = np.diff(values)
        assert np.all(diffs > 0)
        np.testing.assert_allclose(diffs, diffs[0])

    def test_negative_side(self) -> None:
        assert to_acceleration_g(412, 2) == pytest.approx(-100 / 17367)

    def test_custom_offset(self) -> None:
        assert to_acceleration_g(2048, 2, offset=2048) == 0.0

    def test_smaller_sensitivity_gives_larger_g(self) -> None:
        assert to_acceleration_g(612, 16) > to_acceleration_g(612, 2)


class TestToAccelMmPerS2:
    def test_standard_gravity(self) -> None:
        assert to_accel_mm_per_s2(1.0) == pytest.approx(9806.65)
        assert to_accel_mm_per_s2(0.0) == 0.0
        assert to_accel_mm_per_s2(-0.5) == pytest.approx(-0.5 * STANDARD_GRAVITY_MM_S2)


class TestArrayHelpers:
    def test_array_matches_scalar(self) -> None:
        raw = [0, 412, 512, 612, 1023]
        expected = [to_acceleration_g(v, 8) for v in raw]
        np.testing.assert_allclose(adc_to_g_array(raw, 8), expected)

    def test_empty_array(self) -> None:
        assert adc_to_g_array([], 2).size == 0

    def test_mm_per_s2_array(self) -> None:
        np.testing.assert_allclose(g_to_mm_per_s2_array([1.0, -2.0]), [9806.65, -19613.3])
