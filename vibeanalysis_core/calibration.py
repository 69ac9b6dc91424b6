"""ADC-count to engineering-unit conversion for the tri-axial accelerometer."""

from __future__ import annotations

from typing import Final

import numpy as np

ADC_ZERO_OFFSET: Final[int] = 512
"""Raw ADC reading that corresponds to 0 g."""

STANDARD_GRAVITY_MM_S2: Final[float] = 9806.65
"""Multiply g by this to get mm/s²."""

DEFAULT_G_RANGE: Final[int] = 2

_SENSITIVITY_COUNTS_PER_G: Final[dict[int, int]] = {
    2: 17367,
    4: 8684,
    8: 4342,
    16: 2171,
}

G_RANGES: Final[tuple[int, ...]] = tuple(_SENSITIVITY_COUNTS_PER_G)


def sensitivity_for_range(g_range: int | None) -> int:
    """Return ADC counts per g for a ±g range; unknown ranges use the ±2 g value."""
    return _SENSITIVITY_COUNTS_PER_G.get(
        g_range,  # type: ignore[arg-type]
        _SENSITIVITY_COUNTS_PER_G[DEFAULT_G_RANGE],
    )


def to_acceleration_g(
    adc: int, g_range: int = DEFAULT_G_RANGE, *, offset: int = ADC_ZERO_OFFSET
) -> float:
    return (adc - offset) / sensitivity_for_range(g_range)


def to_accel_mm_per_s2(accel_g: float) -> float:
    return accel_g * STANDARD_GRAVITY_MM_S2


def adc_to_g_array(
    samples: np.ndarray | list[int],
    g_range: int = DEFAULT_G_RANGE,
    *,
    offset: int = ADC_ZERO_OFFSET,
) -> np.ndarray:
    """Vectorised :func:`to_acceleration_g` over a whole axis."""
    raw = np.asarray(samples, dtype=np.float64)
    return (raw - float(offset)) / float(sensitivity_for_range(g_range))


def g_to_mm_per_s2_array(values: np.ndarray | list[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64) * STANDARD_GRAVITY_MM_S2


__all__ = [
    "ADC_ZERO_OFFSET",
    "DEFAULT_G_RANGE",
    "G_RANGES",
    "STANDARD_GRAVITY_MM_S2",
    "adc_to_g_array",
    "g_to_mm_per_s2_array",
    "sensitivity_for_range",
    "to_accel_mm_per_s2",
    "to_acceleration_g",
]
