"""JSON serialisation helpers for analysis results.

Results carry numpy arrays and may, for pathological inputs, contain
non-finite floats.  Everything written as JSON goes through
:func:`sanitize_for_json` so the output is plain Python and strict JSON.
"""

from __future__ import annotations

import json
import logging
import math
from enum import Enum
from typing import Any

import numpy as np

__all__ = [
    "safe_json_dumps",
    "sanitize_for_json",
    "sanitize_value",
]

LOGGER = logging.getLogger(__name__)


def _plain_key(key: Any) -> str:
    return str(key.value if isinstance(key, Enum) else key)


def sanitize_for_json(obj: Any) -> tuple[Any, bool]:
    """Recursively replace non-finite floats (NaN, Inf, -Inf) with ``None``.

    ``ndarray`` values become lists, numpy scalars become native Python
    numbers and enums (as values or mapping keys) become their values.

    Returns the sanitised object and a flag telling whether any non-finite
    value was encountered.
    """
    dropped = [False]

    def _clean(value: Any) -> Any:
        if isinstance(value, Enum):
            return _clean(value.value)
        if isinstance(value, np.ndarray):
            return [_clean(item) for item in value.tolist()]
        if isinstance(value, np.generic):
            return _clean(value.item())
        if isinstance(value, float):
            if not math.isfinite(value):
                dropped[0] = True
                return None
            return value
        if isinstance(value, dict):
            return {_plain_key(key): _clean(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [_clean(item) for item in value]
        return value

    cleaned = _clean(obj)
    return cleaned, dropped[0]


def sanitize_value(value: Any) -> Any:
    """Sanitise *value* for JSON, logging when non-finite numbers were dropped."""
    cleaned, found_non_finite = sanitize_for_json(value)
    if found_non_finite:
        LOGGER.warning("Replaced non-finite values with null while serialising result")
    return cleaned


def safe_json_dumps(value: Any, *, indent: int | None = None) -> str:
    """Sanitise *value* and serialise it with ``allow_nan=False``."""
    return json.dumps(sanitize_value(value), ensure_ascii=False, allow_nan=False, indent=indent)
