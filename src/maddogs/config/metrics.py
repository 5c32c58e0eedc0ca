"""Metric table for the sortable and displayed player stats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple


@dataclass(frozen=True)
class Metric:
    key: str
    label: str
    decimals: int
    description: str = ""

    def format(self, value: float) -> str:
        if self.decimals == 0:
            return f"{value:.0f}"
        text = f"{value:.{self.decimals}f}"
        # Rate stats read as ".375" rather than "0.375".
        if self.decimals == 3 and text.startswith("0."):
            return text[1:]
        if self.decimals == 3 and text.startswith("-0."):
            return "-" + text[2:]
        return text


_METRICS: Dict[str, Metric] = {
    metric.key: metric
    for metric in (
        Metric("pa", "PA", 0, "Plate appearances"),
        Metric("at_bats", "AB", 0, "At bats (PA minus walks)"),
        Metric("hits", "H", 0, "Hits"),
        Metric("singles", "1B", 0, "Singles"),
        Metric("double", "2B", 0, "Doubles"),
        Metric("triple", "3B", 0, "Triples"),
        Metric("homerun", "HR", 0, "Home runs"),
        Metric("walks", "BB", 0, "Walks"),
        Metric("total_bases", "TB", 0, "Total bases"),
        Metric("sb", "SB", 0, "Stolen bases"),
        Metric("sb_fail", "CS", 0, "Failed steal attempts"),
        Metric("avg", "AVG", 3, "Batting average"),
        Metric("obp", "OBP", 3, "On-base percentage"),
        Metric("slg", "SLG", 3, "Slugging percentage"),
        Metric("ops", "OPS", 3, "On-base plus slugging"),
        Metric("runs_created", "RC", 1, "Runs created"),
        Metric("stolen_base_rate", "SB%", 0, "Stolen base success rate"),
        Metric("ops_plus_index", "OPS+", 0, "OPS relative to team average (100 = average)"),
        Metric("war_proxy", "WAR*", 2, "Runs created above team average / 5"),
    )
}

# Columns of the stats table, in display order.
TABLE_COLUMNS: Tuple[str, ...] = (
    "pa",
    "at_bats",
    "hits",
    "double",
    "triple",
    "homerun",
    "walks",
    "sb",
    "avg",
    "obp",
    "slg",
    "ops",
    "ops_plus_index",
    "runs_created",
    "stolen_base_rate",
    "war_proxy",
)

# Leader cards shown above the table.
LEADER_KEYS: Tuple[str, ...] = ("war_proxy", "ops", "obp", "slg", "walks", "homerun")

DEFAULT_SORT_KEY = "ops"


def iter_metrics() -> Iterable[Metric]:
    """Return an iterator of all configured metrics."""

    return _METRICS.values()


def get_metric(key: str) -> Metric:
    """Fetch a metric by field name, raising KeyError if it is not sortable."""

    if key not in _METRICS:
        raise KeyError(f"No metric configured for key={key!r}")
    return _METRICS[key]


def is_metric(key: str) -> bool:
    return key in _METRICS

