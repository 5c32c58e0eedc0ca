"""Environment-driven settings for reaching the data service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .metrics import DEFAULT_SORT_KEY, is_metric


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

_DATA_URL_ENV = "MADDOGS_DATA_URL"
_DATA_KEY_ENV = "MADDOGS_DATA_KEY"
_DATA_TIMEOUT_ENV = "MADDOGS_DATA_TIMEOUT"
_DEFAULT_SORT_ENV = "MADDOGS_DEFAULT_SORT"

_DATA_URL_DEFAULT = "http://localhost:54321"
_DATA_TIMEOUT_DEFAULT = 10.0


@dataclass(frozen=True)
class Settings:
    data_url: str = _DATA_URL_DEFAULT
    data_key: str = ""
    timeout: float = _DATA_TIMEOUT_DEFAULT
    default_sort: str = DEFAULT_SORT_KEY


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_sort_key(name: str, default: str) -> str:
    raw = os.getenv(name)
    if not raw:
        return default
    if not is_metric(raw):
        logger.warning("Unknown sort key for %s: %s; using default %s", name, raw, default)
        return default
    return raw


def load_settings() -> Settings:
    """Read settings from the environment, falling back to local defaults."""

    return Settings(
        data_url=(os.getenv(_DATA_URL_ENV) or _DATA_URL_DEFAULT).rstrip("/"),
        data_key=os.getenv(_DATA_KEY_ENV, ""),
        timeout=_env_float(_DATA_TIMEOUT_ENV, _DATA_TIMEOUT_DEFAULT, clamp_min=0.1),
        default_sort=_env_sort_key(_DEFAULT_SORT_ENV, DEFAULT_SORT_KEY),
    )
