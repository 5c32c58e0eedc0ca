"""Stat pipeline: per-player rates, team averages and rankings."""

from .calculator import (
    WAR_RUNS_PER_WIN,
    apply_league_relative,
    compute_rates,
    derive_player_stats,
    summarize_team,
)
from .ranking import PLACEHOLDER_NAME, leaderboard, placeholder_player, sort_players, top_player

__all__ = [
    "WAR_RUNS_PER_WIN",
    "PLACEHOLDER_NAME",
    "apply_league_relative",
    "compute_rates",
    "derive_player_stats",
    "leaderboard",
    "placeholder_player",
    "sort_players",
    "summarize_team",
    "top_player",
]
