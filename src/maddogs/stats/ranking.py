"""Ordering helpers for the stats table and leader cards."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from maddogs.config.metrics import get_metric
from maddogs.models import DerivedPlayerStats


PLACEHOLDER_NAME = "-"


def placeholder_player() -> DerivedPlayerStats:
    """Zero-valued stand-in returned when there is nobody to rank."""

    zeros = {name: 0 for name in DerivedPlayerStats.model_fields if name != "name"}
    return DerivedPlayerStats(name=PLACEHOLDER_NAME, **zeros)


def sort_players(players: Iterable[DerivedPlayerStats], key: str) -> List[DerivedPlayerStats]:
    """Return a new list ordered by ``key``, highest first.

    The sort is stable: players with equal values keep their incoming order,
    which is ascending ``id`` when the list comes straight from the gateway.
    Raises KeyError for a field that is not a configured metric.
    """

    get_metric(key)
    return sorted(players, key=lambda player: getattr(player, key), reverse=True)


def top_player(players: Sequence[DerivedPlayerStats], key: str) -> DerivedPlayerStats:
    ordered = sort_players(players, key)
    if not ordered:
        return placeholder_player()
    return ordered[0]


def leaderboard(
    players: Sequence[DerivedPlayerStats],
    keys: Iterable[str],
) -> Dict[str, DerivedPlayerStats]:
    return {key: top_player(players, key) for key in keys}
