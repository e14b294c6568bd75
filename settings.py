from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_TICK_INTERVAL_ENV = "MONITOR_TICK_INTERVAL_SECONDS"
_HISTORY_CAPACITY_ENV = "MONITOR_HISTORY_CAPACITY"
_SPARKLINE_POINTS_ENV = "MONITOR_SPARKLINE_POINTS"
_INITIAL_SALINITY_ENV = "MONITOR_INITIAL_SALINITY"
_INITIAL_TEMPERATURE_ENV = "MONITOR_INITIAL_TEMPERATURE"
_RANDOM_SEED_ENV = "MONITOR_RANDOM_SEED"
_HISTORY_SEED_ENV = "MONITOR_HISTORY_SEED"
_SMS_DEFAULT_ENV = "NOTIFY_SMS_DEFAULT"
_PUSH_DEFAULT_ENV = "NOTIFY_PUSH_DEFAULT"
_DEFAULT_PHONE_ENV = "NOTIFY_DEFAULT_PHONE"
_ADVISORY_URL_ENV = "ADVISORY_SERVICE_URL"
_ADVISORY_TIMEOUT_ENV = "ADVISORY_TIMEOUT_SECONDS"
_CREDENTIALS_PATH_ENV = "CREDENTIALS_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"

HISTORY_SEED_MODES = ("static", "clock", "empty")
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    tick_interval: float
    history_capacity: int
    sparkline_points: int
    initial_salinity: float
    initial_temperature: float
    random_seed: Optional[int]
    history_seed: str
    sms_enabled_default: bool
    push_enabled_default: bool
    default_phone: Optional[str]
    advisory_url: Optional[str]
    advisory_timeout: float
    credentials_path: Optional[str]
    log_level: str


def _read_raw(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_float(name: str, default: float) -> float:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    try:
        return float(candidate)
    except ValueError:
        return default


def _read_seed(default: Optional[int]) -> Optional[int]:
    candidate = _read_raw(_RANDOM_SEED_ENV)
    if candidate is None:
        return default
    try:
        return int(candidate)
    except ValueError:
        return default


def _read_bool(name: str, default: bool) -> bool:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    lowered = candidate.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return default


def _read_history_seed(default: str) -> str:
    candidate = _read_raw(_HISTORY_SEED_ENV)
    if candidate is None:
        return default
    lowered = candidate.lower()
    return lowered if lowered in HISTORY_SEED_MODES else default


def _read_log_level(default: str) -> str:
    candidate = _read_raw(_LOG_LEVEL_ENV)
    if candidate is None:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        tick_interval=_read_positive_float(_TICK_INTERVAL_ENV, 3.0),
        history_capacity=_read_positive_int(_HISTORY_CAPACITY_ENV, 7),
        sparkline_points=_read_positive_int(_SPARKLINE_POINTS_ENV, 5),
        initial_salinity=_read_float(_INITIAL_SALINITY_ENV, 1.5),
        initial_temperature=_read_float(_INITIAL_TEMPERATURE_ENV, 29.2),
        random_seed=_read_seed(None),
        history_seed=_read_history_seed("static"),
        sms_enabled_default=_read_bool(_SMS_DEFAULT_ENV, False),
        push_enabled_default=_read_bool(_PUSH_DEFAULT_ENV, False),
        default_phone=_read_optional_env(_DEFAULT_PHONE_ENV, None),
        advisory_url=_read_optional_env(_ADVISORY_URL_ENV, None),
        advisory_timeout=_read_positive_float(_ADVISORY_TIMEOUT_ENV, 15.0),
        credentials_path=_read_optional_env(_CREDENTIALS_PATH_ENV, "./tmp/credentials.json"),
        log_level=_read_log_level("INFO"),
    )
