"""Connection and display settings for the monitor CLI.

Command-line flags win over environment variables, which win over the
defaults below. Malformed or non-positive values fall back to the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

DEFAULT_BASE_URL = "http://localhost:8000"
# Matches the server's default tick interval.
DEFAULT_POLL_INTERVAL = 3.0
# Species checks wait on the advisory service, which has its own 15 s budget.
DEFAULT_TIMEOUT = 30.0

_BASE_URL_ENV = "API_BASE_URL"
_POLL_INTERVAL_ENV = "CLI_POLL_INTERVAL"
_TIMEOUT_ENV = "CLI_REQUEST_TIMEOUT"
_HISTORY_COUNT_ENV = "CLI_HISTORY_COUNT"

_Number = TypeVar("_Number", int, float)


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_TIMEOUT
    history_count: Optional[int] = None


def _read_positive(value: Optional[str], parse: Callable[[str], _Number], default):
    if value is None or not value.strip():
        return default
    try:
        parsed = parse(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def normalize_base_url(value: str) -> str:
    """Trim trailing slashes and assume plain HTTP for bare ``host:port`` values."""
    url = value.strip().rstrip("/")
    if not url:
        return DEFAULT_BASE_URL
    if "://" not in url:
        url = f"http://{url}"
    return url


def load_config(
    base_url: Optional[str] = None,
    poll_interval: Optional[float] = None,
    request_timeout: Optional[float] = None,
    history_count: Optional[int] = None,
) -> CLIConfig:
    url = normalize_base_url(base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL)
    if poll_interval is None:
        poll_interval = _read_positive(os.getenv(_POLL_INTERVAL_ENV), float, DEFAULT_POLL_INTERVAL)
    if request_timeout is None:
        request_timeout = _read_positive(os.getenv(_TIMEOUT_ENV), float, DEFAULT_TIMEOUT)
    if history_count is None:
        history_count = _read_positive(os.getenv(_HISTORY_COUNT_ENV), int, None)
    return CLIConfig(
        base_url=url,
        poll_interval=poll_interval,
        request_timeout=request_timeout,
        history_count=history_count,
    )
