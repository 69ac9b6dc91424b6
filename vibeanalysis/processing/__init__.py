"""Signal processing package.

This package contains the vibration signal processing pipeline:

- :mod:`~vibeanalysis.processing.integration`: acceleration → velocity integration.
- :mod:`~vibeanalysis.processing.fft`: pure FFT / spectral-analysis functions.
- :mod:`~vibeanalysis.processing.pipeline`: per-batch pipeline and the stateless
  :class:`SignalAnalyzer` service.

All public symbols are re-exported here so callers can write
``from vibeanalysis.processing import analyze_batch``.
"""

from .fft import (
    compute_spectrum,
    dominant_frequency,
    extract_statistics,
    next_power_of_two,
    top_peaks,
)
from .integration import integrate_velocity
from .pipeline import (
    SignalAnalyzer,
    analyze_axis,
    analyze_batch,
    analyze_batches,
    convert_axis,
    overall_status,
    scalar_reading_status,
)

__all__ = [
    "SignalAnalyzer",
    "analyze_axis",
    "analyze_batch",
    "analyze_batches",
    "compute_spectrum",
    "convert_axis",
    "dominant_frequency",
    "extract_statistics",
    "integrate_velocity",
    "next_power_of_two",
    "overall_status",
    "scalar_reading_status",
    "top_peaks",
]
