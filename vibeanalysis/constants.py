"""Shared analysis constants; single source of truth.

Every numeric literal that appears in more than one module should live here
so that a change only needs to happen in one place.
"""

from __future__ import annotations

from typing import Final

from vibeanalysis_core.calibration import ADC_ZERO_OFFSET as ADC_ZERO_OFFSET
from vibeanalysis_core.calibration import DEFAULT_G_RANGE as DEFAULT_G_RANGE
from vibeanalysis_core.calibration import STANDARD_GRAVITY_MM_S2 as STANDARD_GRAVITY_MM_S2

# ---------------------------------------------------------------------------
# Acquisition
# ---------------------------------------------------------------------------
DEFAULT_SAMPLING_RATE_HZ: Final[float] = 50.0
"""Sensor output data rate assumed when a batch does not state one."""

# ---------------------------------------------------------------------------
# Spectrum
# ---------------------------------------------------------------------------
SPECTRUM_MAGNITUDE_SCALE: Final[float] = 2.56
"""Numerator of the ``2.56 / n`` magnitude normalisation."""

DEFAULT_TOP_N_PEAKS: Final[int] = 5
MAX_TOP_N_PEAKS: Final[int] = 50

PEAK_RMS_DECIMALS: Final[int] = 3
"""Decimal places kept on the per-peak RMS figure."""

# ---------------------------------------------------------------------------
# Severity
# ---------------------------------------------------------------------------
SEVERITY_METRICS: Final[tuple[str, ...]] = ("rms", "peak", "peak_to_peak")
DEFAULT_SEVERITY_METRIC: Final[str] = "rms"

OVERALL_WARNING_G: Final[float] = 0.5
OVERALL_CRITICAL_G: Final[float] = 0.8

VELOCITY_WARNING_MM_S: Final[float] = 2.8
"""ISO 10816 group 2 zone B/C boundary (mm/s RMS)."""

VELOCITY_CRITICAL_MM_S: Final[float] = 7.1
"""ISO 10816 group 2 zone C/D boundary (mm/s RMS)."""

ACCEL_MM_S2_WARNING: Final[float] = round(OVERALL_WARNING_G * STANDARD_GRAVITY_MM_S2, 6)
ACCEL_MM_S2_CRITICAL: Final[float] = round(OVERALL_CRITICAL_G * STANDARD_GRAVITY_MM_S2, 6)
"""The g thresholds expressed in mm/s²."""
