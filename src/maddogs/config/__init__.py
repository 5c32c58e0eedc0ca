"""Configuration helpers for metrics and data-service settings."""

from .metrics import (
    DEFAULT_SORT_KEY,
    LEADER_KEYS,
    TABLE_COLUMNS,
    Metric,
    get_metric,
    is_metric,
    iter_metrics,
)
from .settings import Settings, load_settings

__all__ = [
    "DEFAULT_SORT_KEY",
    "LEADER_KEYS",
    "TABLE_COLUMNS",
    "Metric",
    "Settings",
    "get_metric",
    "is_metric",
    "iter_metrics",
    "load_settings",
]
