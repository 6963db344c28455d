from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_STORE_PATH_ENV = "READINGS_STORE_PATH"
_WINDOW_HOURS_ENV = "READINGS_WINDOW_HOURS"
_MAX_POINTS_ENV = "SERIES_MAX_POINTS"
_NITROGEN_ALERT_ENV = "NITROGEN_ALERT_PPM"
_PH_MIN_ENV = "PH_MIN"
_PH_MAX_ENV = "PH_MAX"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    store_path: Optional[str]
    window_hours: int
    series_max_points: int
    nitrogen_alert_ppm: float
    ph_min: float
    ph_max: float
    log_level: str


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return float(candidate)
    except ValueError:
        return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    ph_min = _read_float(_PH_MIN_ENV, 6.0)
    ph_max = _read_float(_PH_MAX_ENV, 7.0)
    if ph_min > ph_max:
        ph_min, ph_max = 6.0, 7.0
    return Settings(
        store_path=_read_optional_env(_STORE_PATH_ENV, "./tmp/readings.json"),
        window_hours=_read_positive_int(_WINDOW_HOURS_ENV, 24),
        series_max_points=_read_positive_int(_MAX_POINTS_ENV, 30),
        nitrogen_alert_ppm=_read_float(_NITROGEN_ALERT_ENV, 200.0),
        ph_min=ph_min,
        ph_max=ph_max,
        log_level=_read_log_level("INFO"),
    )
