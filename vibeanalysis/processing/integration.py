"""Acceleration → velocity integration."""

from __future__ import annotations

import math

import numpy as np

from ..errors import InvalidInputError


def integrate_velocity(accel: np.ndarray | list[float], dt: float) -> np.ndarray:
    """Cumulative trapezoidal integral of *accel* with step *dt*.

    The first output sample is the 0 reference and the output has the same
    length as the input.  Inputs shorter than two samples give ``[0.0]``.
    No drift or mean correction is applied, so a DC offset in *accel*
    shows up as a linear ramp in the result.
    """
    if not isinstance(dt, (int, float)) or not math.isfinite(dt) or dt <= 0:
        raise InvalidInputError(f"time interval must be > 0, got {dt!r}")
    a = np.asarray(accel, dtype=np.float64).ravel()
    if a.size < 2:
        return np.zeros(1, dtype=np.float64)
    increments = 0.5 * float(dt) * (a[:-1] + a[1:])
    velocity = np.empty(a.size, dtype=np.float64)
    velocity[0] = 0.0
    np.cumsum(increments, out=velocity[1:])
    return velocity
