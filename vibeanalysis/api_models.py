"""Pydantic models for raw sample-batch payloads.

Sensor payloads arrive as loosely-typed JSON.  These models validate them
strictly and turn them into :class:`~vibeanalysis.domain_models.SampleBatch`
values; anything malformed is reported as
:class:`~vibeanalysis.errors.InvalidInputError` instead of being coerced.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    model_validator,
)

from .domain_models import CalibrationConfig, SampleBatch
from .errors import InvalidInputError


class SampleBatchPayload(BaseModel):
    """One acquisition as sent by a sensor gateway.

    Axis arrays may be keyed ``h``/``v``/``a`` or ``x``/``y``/``z``.
    ``sampling_rate_hz`` and ``g_range`` fall back to the calibration
    defaults when omitted.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    h: list[StrictInt] = Field(validation_alias=AliasChoices("h", "x"))
    v: list[StrictInt] = Field(validation_alias=AliasChoices("v", "y"))
    a: list[StrictInt] = Field(validation_alias=AliasChoices("a", "z"))
    timestamp: datetime | None = Field(
        default=None, validation_alias=AliasChoices("timestamp", "datetime")
    )
    sampling_rate_hz: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    g_range: Literal[2, 4, 8, 16] | None = None

    @model_validator(mode="after")
    def _check_axis_lengths(self) -> SampleBatchPayload:
        lengths = (len(self.h), len(self.v), len(self.a))
        if len(set(lengths)) != 1:
            raise ValueError(
                f"axis arrays must have equal length (h={lengths[0]}, v={lengths[1]}, "
                f"a={lengths[2]})"
            )
        if lengths[0] < 1:
            raise ValueError("axis arrays must contain at least one sample")
        return self

    def to_batch(self, calibration: CalibrationConfig | None = None) -> SampleBatch:
        calibration = calibration or CalibrationConfig()
        return SampleBatch(
            h=self.h,  # type: ignore[arg-type]
            v=self.v,  # type: ignore[arg-type]
            a=self.a,  # type: ignore[arg-type]
            sampling_rate_hz=(
                self.sampling_rate_hz
                if self.sampling_rate_hz is not None
                else calibration.sampling_rate_hz
            ),
            g_range=self.g_range if self.g_range is not None else calibration.g_range,
            timestamp=self.timestamp,
        )


def _format_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "payload"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def parse_sample_batch(
    payload: Any, *, calibration: CalibrationConfig | None = None
) -> SampleBatch:
    """Validate a JSON payload and build a :class:`SampleBatch`.

    Accepts the batch fields at the top level or wrapped in a ``data``
    object, as the sensor service returns them.
    """
    if not isinstance(payload, dict):
        raise InvalidInputError("payload must be a JSON object")
    body = payload["data"] if isinstance(payload.get("data"), dict) else payload
    try:
        model = SampleBatchPayload.model_validate(body)
    except ValidationError as exc:
        raise InvalidInputError(_format_validation_error(exc)) from None
    return model.to_batch(calibration)
