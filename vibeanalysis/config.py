from __future__ import annotations

import logging
import math
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from vibeanalysis_core.calibration import G_RANGES

from .constants import (
    ACCEL_MM_S2_CRITICAL,
    ACCEL_MM_S2_WARNING,
    ADC_ZERO_OFFSET,
    DEFAULT_G_RANGE,
    DEFAULT_SAMPLING_RATE_HZ,
    DEFAULT_SEVERITY_METRIC,
    DEFAULT_TOP_N_PEAKS,
    MAX_TOP_N_PEAKS,
    OVERALL_CRITICAL_G,
    OVERALL_WARNING_G,
    SEVERITY_METRICS,
    VELOCITY_CRITICAL_MM_S,
    VELOCITY_WARNING_MM_S,
)
from .domain_models import AnalysisSettings, CalibrationConfig, SeverityThresholds, Unit

PROJECT_DIR = Path(__file__).resolve().parents[1]
"""Root of the source checkout (holds ``config.example.yaml``)."""

LOGGER = logging.getLogger(__name__)

VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG: dict[str, Any] = {
    "calibration": {
        "adc_offset": ADC_ZERO_OFFSET,
        "g_range": DEFAULT_G_RANGE,
        "sampling_rate_hz": DEFAULT_SAMPLING_RATE_HZ,
    },
    "spectrum": {
        "top_n": DEFAULT_TOP_N_PEAKS,
        "nyquist_truncation": False,
    },
    "severity": {
        "metric": DEFAULT_SEVERITY_METRIC,
        "acceleration_g": {"warning": OVERALL_WARNING_G, "critical": OVERALL_CRITICAL_G},
        "acceleration_mm_s2": {"warning": ACCEL_MM_S2_WARNING, "critical": ACCEL_MM_S2_CRITICAL},
        "velocity_mm_s": {"warning": VELOCITY_WARNING_MM_S, "critical": VELOCITY_CRITICAL_MM_S},
        "overall": {"warning": OVERALL_WARNING_G, "critical": OVERALL_CRITICAL_G},
    },
    "logging": {"level": "INFO"},
}


def documented_default_config() -> dict[str, Any]:
    """Return runtime defaults in the shape documented by config.example.yaml."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    out = float(value)
    if not math.isfinite(out):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return out


@dataclass(slots=True)
class CalibrationSection:
    adc_offset: int
    g_range: int
    sampling_rate_hz: float

    def __post_init__(self) -> None:
        if self.g_range not in G_RANGES:
            LOGGER.warning(
                "calibration.g_range=%s is not one of %s — using %s",
                self.g_range,
                G_RANGES,
                DEFAULT_G_RANGE,
            )
            object.__setattr__(self, "g_range", DEFAULT_G_RANGE)
        if self.sampling_rate_hz <= 0:
            raise ValueError(
                f"calibration.sampling_rate_hz must be > 0, got {self.sampling_rate_hz!r}"
            )


@dataclass(slots=True)
class SpectrumSection:
    top_n: int
    nyquist_truncation: bool

    def __post_init__(self) -> None:
        clamped = max(1, min(MAX_TOP_N_PEAKS, self.top_n))
        if clamped != self.top_n:
            LOGGER.warning(
                "spectrum.top_n=%s is outside 1–%s — clamped to %s",
                self.top_n,
                MAX_TOP_N_PEAKS,
                clamped,
            )
            object.__setattr__(self, "top_n", clamped)


@dataclass(slots=True)
class ThresholdPair:
    warning: float
    critical: float
    name: str = ""

    def __post_init__(self) -> None:
        if self.warning > self.critical:
            LOGGER.warning(
                "severity.%s warning=%s > critical=%s — swapped",
                self.name,
                self.warning,
                self.critical,
            )
            warning, critical = self.critical, self.warning
            object.__setattr__(self, "warning", warning)
            object.__setattr__(self, "critical", critical)

    def to_thresholds(self) -> SeverityThresholds:
        return SeverityThresholds(warning=self.warning, critical=self.critical)


@dataclass(slots=True)
class SeveritySection:
    metric: str
    acceleration_g: ThresholdPair
    acceleration_mm_s2: ThresholdPair
    velocity_mm_s: ThresholdPair
    overall: ThresholdPair

    def __post_init__(self) -> None:
        if self.metric not in SEVERITY_METRICS:
            raise ValueError(
                f"severity.metric must be one of {', '.join(SEVERITY_METRICS)}, "
                f"got {self.metric!r}"
            )

    def by_unit(self) -> dict[Unit, SeverityThresholds]:
        return {
            Unit.ACCELERATION_G: self.acceleration_g.to_thresholds(),
            Unit.ACCELERATION_MM_S2: self.acceleration_mm_s2.to_thresholds(),
            Unit.VELOCITY_MM_S: self.velocity_mm_s.to_thresholds(),
        }


@dataclass(slots=True)
class LoggingSection:
    level: str

    def __post_init__(self) -> None:
        level = str(self.level).strip().upper()
        if level not in VALID_LOG_LEVELS:
            LOGGER.warning("logging.level=%r is not a valid level — using INFO", self.level)
            level = "INFO"
        object.__setattr__(self, "level", level)


@dataclass(slots=True)
class AppConfig:
    calibration: CalibrationSection
    spectrum: SpectrumSection
    severity: SeveritySection
    logging: LoggingSection
    config_path: Path | None = None

    def calibration_config(self) -> CalibrationConfig:
        return CalibrationConfig(
            adc_offset=self.calibration.adc_offset,
            g_range=self.calibration.g_range,
            sampling_rate_hz=self.calibration.sampling_rate_hz,
        )

    def analysis_settings(self) -> AnalysisSettings:
        return AnalysisSettings(
            adc_offset=self.calibration.adc_offset,
            top_n=self.spectrum.top_n,
            nyquist_truncation=self.spectrum.nyquist_truncation,
            severity_metric=self.severity.metric,
            unit_thresholds=self.severity.by_unit(),
            overall_thresholds=self.severity.overall.to_thresholds(),
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def _threshold_pair(section: dict[str, Any], name: str) -> ThresholdPair:
    raw = section.get(name)
    if not isinstance(raw, dict):
        raise ValueError(f"severity.{name} must be a mapping with warning/critical")
    return ThresholdPair(
        warning=_as_float(raw.get("warning"), f"severity.{name}.warning"),
        critical=_as_float(raw.get("critical"), f"severity.{name}.critical"),
        name=name,
    )


def config_from_dict(data: dict[str, Any], *, config_path: Path | None = None) -> AppConfig:
    """Build an :class:`AppConfig` from an override mapping merged onto the defaults."""
    merged = _deep_merge(DEFAULT_CONFIG, data)
    calibration = merged["calibration"]
    spectrum = merged["spectrum"]
    severity = merged["severity"]

    g_range_raw = calibration.get("g_range")
    if isinstance(g_range_raw, bool) or not isinstance(g_range_raw, int):
        raise ValueError(f"calibration.g_range must be an integer, got {g_range_raw!r}")
    adc_offset_raw = calibration.get("adc_offset")
    if isinstance(adc_offset_raw, bool) or not isinstance(adc_offset_raw, int):
        raise ValueError(f"calibration.adc_offset must be an integer, got {adc_offset_raw!r}")
    top_n_raw = spectrum.get("top_n")
    if isinstance(top_n_raw, bool) or not isinstance(top_n_raw, int):
        raise ValueError(f"spectrum.top_n must be an integer, got {top_n_raw!r}")
    truncation_raw = spectrum.get("nyquist_truncation")
    if not isinstance(truncation_raw, bool):
        raise ValueError(
            f"spectrum.nyquist_truncation must be true or false, got {truncation_raw!r}"
        )

    return AppConfig(
        calibration=CalibrationSection(
            adc_offset=adc_offset_raw,
            g_range=g_range_raw,
            sampling_rate_hz=_as_float(
                calibration.get("sampling_rate_hz"), "calibration.sampling_rate_hz"
            ),
        ),
        spectrum=SpectrumSection(
            top_n=top_n_raw,
            nyquist_truncation=truncation_raw,
        ),
        severity=SeveritySection(
            metric=str(severity.get("metric", DEFAULT_SEVERITY_METRIC)),
            acceleration_g=_threshold_pair(severity, "acceleration_g"),
            acceleration_mm_s2=_threshold_pair(severity, "acceleration_mm_s2"),
            velocity_mm_s=_threshold_pair(severity, "velocity_mm_s"),
            overall=_threshold_pair(severity, "overall"),
        ),
        logging=LoggingSection(level=str(merged["logging"].get("level", "INFO"))),
        config_path=config_path,
    )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load defaults, overridden by *config_path* when given and present."""
    if config_path is None:
        app_config = config_from_dict({})
        LOGGER.info("Loaded default config")
        return app_config
    path = config_path.resolve()
    app_config = config_from_dict(_read_config_file(path), config_path=path)
    LOGGER.info(
        "Loaded config=%s g_range=%s sampling_rate_hz=%s metric=%s",
        path,
        app_config.calibration.g_range,
        app_config.calibration.sampling_rate_hz,
        app_config.severity.metric,
    )
    return app_config
