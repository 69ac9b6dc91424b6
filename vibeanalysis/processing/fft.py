"""Pure spectral-analysis functions used by the analysis pipeline.

All functions in this module are stateless: they take arrays (and scalar
parameters) and return results without touching any shared mutable state.
Intermediate buffers are call-local, so every function is re-entrant.

Spectrum length convention
--------------------------
The transform is computed on the series zero-padded to the next power of
two.  By default the first ``n`` bins are kept, where ``n`` is the
*unpadded* length, and bin ``i`` is labelled ``i * rate / n``.  When
padding occurred this keeps bins past the true Nyquist limit; existing
results depend on it.  ``nyquist_truncation=True`` keeps
``padded_len // 2`` bins labelled ``i * rate / padded_len`` instead.
"""

from __future__ import annotations

import math

import numpy as np
from vibeanalysis_core.statistics import SINE_RMS_FACTOR, vibration_statistics

from ..constants import DEFAULT_TOP_N_PEAKS, PEAK_RMS_DECIMALS, SPECTRUM_MAGNITUDE_SCALE
from ..domain_models import SpectralPeak, Spectrum, VibrationStatistics
from ..errors import InvalidInputError


def next_power_of_two(n: int) -> int:
    """Smallest power of two ``>= n`` (``1`` for ``n <= 1``)."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def compute_spectrum(
    series: np.ndarray | list[float],
    sampling_rate_hz: float,
    *,
    nyquist_truncation: bool = False,
) -> Spectrum:
    """Magnitude spectrum of *series* with ``2.56 / n`` scaling.

    An empty series gives an empty spectrum without running a transform;
    a single sample gives one DC bin.
    """
    if (
        not isinstance(sampling_rate_hz, (int, float))
        or not math.isfinite(sampling_rate_hz)
        or sampling_rate_hz <= 0
    ):
        raise InvalidInputError(f"sampling rate must be > 0, got {sampling_rate_hz!r}")
    x = np.asarray(series, dtype=np.float64).ravel()
    n = int(x.size)
    if n == 0:
        return Spectrum.empty()

    padded_len = next_power_of_two(n)
    bins = np.fft.fft(x, n=padded_len)
    magnitude_scale = SPECTRUM_MAGNITUDE_SCALE / n
    if nyquist_truncation:
        keep = max(1, padded_len // 2)
        freq_step = float(sampling_rate_hz) / padded_len
    else:
        keep = n
        freq_step = float(sampling_rate_hz) / n

    magnitude = magnitude_scale * np.abs(bins[:keep])
    frequency = np.arange(keep, dtype=np.float64) * freq_step
    return Spectrum(frequency_hz=frequency, magnitude=magnitude)


def _ranked_bins(spectrum: Spectrum) -> np.ndarray:
    """Non-DC bin indices by descending magnitude; equal magnitudes keep bin order."""
    if len(spectrum) < 2:
        return np.empty(0, dtype=np.intp)
    # Stable sort on the negated magnitudes keeps lower bins first on ties.
    order = np.argsort(-spectrum.magnitude[1:], kind="stable")
    return order + 1


def top_peaks(spectrum: Spectrum, *, top_n: int = DEFAULT_TOP_N_PEAKS) -> list[SpectralPeak]:
    """The *top_n* strongest non-DC bins, strongest first."""
    peaks: list[SpectralPeak] = []
    for idx in _ranked_bins(spectrum)[: max(0, int(top_n))]:
        magnitude = float(spectrum.magnitude[idx])
        peaks.append(
            SpectralPeak(
                frequency_hz=float(spectrum.frequency_hz[idx]),
                magnitude=magnitude,
                rms=round(magnitude * SINE_RMS_FACTOR, PEAK_RMS_DECIMALS),
            )
        )
    return peaks


def dominant_frequency(spectrum: Spectrum) -> float | None:
    """Frequency of the strongest non-DC bin, or ``None`` if there is none."""
    ranked = _ranked_bins(spectrum)
    if ranked.size == 0:
        return None
    return float(spectrum.frequency_hz[ranked[0]])


def extract_statistics(
    series: np.ndarray | list[float],
    spectrum: Spectrum,
    *,
    top_n: int = DEFAULT_TOP_N_PEAKS,
) -> tuple[VibrationStatistics, list[SpectralPeak]]:
    """Time-domain statistics of *series* and the ranked peaks of *spectrum*.

    Empty inputs give zero statistics and no peaks.
    """
    return vibration_statistics(series), top_peaks(spectrum, top_n=top_n)
