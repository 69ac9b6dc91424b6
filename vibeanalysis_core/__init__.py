from .calibration import (
    ADC_ZERO_OFFSET,
    G_RANGES,
    STANDARD_GRAVITY_MM_S2,
    sensitivity_for_range,
    to_accel_mm_per_s2,
    to_acceleration_g,
)
from .severity import (
    MAX_THRESHOLD,
    MIN_THRESHOLD,
    DisplayBucket,
    SeverityLevel,
    classify,
    display_bucket,
)
from .statistics import (
    VibrationStatistics,
    estimated_peak_from_rms,
    rms,
    triaxial_rms,
    true_absolute_peak,
    vibration_statistics,
)

__all__ = [
    "ADC_ZERO_OFFSET",
    "G_RANGES",
    "MAX_THRESHOLD",
    "MIN_THRESHOLD",
    "STANDARD_GRAVITY_MM_S2",
    "DisplayBucket",
    "SeverityLevel",
    "VibrationStatistics",
    "classify",
    "display_bucket",
    "estimated_peak_from_rms",
    "rms",
    "sensitivity_for_range",
    "to_accel_mm_per_s2",
    "to_acceleration_g",
    "triaxial_rms",
    "true_absolute_peak",
    "vibration_statistics",
]
