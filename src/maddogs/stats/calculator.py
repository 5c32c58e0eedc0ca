"""Rate stats derived from raw counting stats.

The pipeline runs in three passes over the whole player list:

1. :func:`compute_rates` turns each record into its per-player rates.
2. :func:`summarize_team` averages those rates across the team.
3. :func:`apply_league_relative` scales each player against the team.

Every division is guarded so an empty denominator yields ``0`` instead of
``nan``/``inf``. Inputs are not validated here.
"""

from __future__ import annotations

from statistics import fmean
from typing import List, Sequence, Tuple

from maddogs.models import DerivedPlayerStats, PlayerRates, PlayerRecord, TeamAverages


# Runs above team average per win for the WAR proxy. A fixed scale, not a
# calibrated runs-per-win estimate.
WAR_RUNS_PER_WIN = 5.0


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def compute_rates(record: PlayerRecord) -> PlayerRates:
    """Derive the per-player rates that do not depend on the rest of the team."""

    at_bats = record.pa - record.walks
    singles = record.hits - (record.double + record.triple + record.homerun)
    total_bases = singles + 2 * record.double + 3 * record.triple + 4 * record.homerun

    avg = _ratio(record.hits, at_bats)
    obp = _ratio(record.hits + record.walks, record.pa)
    slg = _ratio(total_bases, at_bats)

    stolen_base_attempts = record.sb + record.sb_fail
    stolen_base_rate = 100.0 * _ratio(record.sb, stolen_base_attempts)

    runs_created = _ratio((record.hits + record.walks) * total_bases, record.pa)

    return PlayerRates(
        **record.model_dump(),
        at_bats=at_bats,
        singles=singles,
        total_bases=total_bases,
        avg=avg,
        obp=obp,
        slg=slg,
        ops=obp + slg,
        stolen_base_attempts=stolen_base_attempts,
        stolen_base_rate=stolen_base_rate,
        runs_created=runs_created,
    )


def summarize_team(rates: Sequence[PlayerRates]) -> TeamAverages:
    """Mean AVG, OPS and runs created across the team; zeros for an empty team."""

    if not rates:
        return TeamAverages()
    return TeamAverages(
        player_count=len(rates),
        team_avg_avg=fmean(player.avg for player in rates),
        team_avg_ops=fmean(player.ops for player in rates),
        team_avg_rc=fmean(player.runs_created for player in rates),
    )


def apply_league_relative(rates: PlayerRates, team: TeamAverages) -> DerivedPlayerStats:
    ops_plus_index = 100.0 * _ratio(rates.ops, team.team_avg_ops)
    war_proxy = (rates.runs_created - team.team_avg_rc) / WAR_RUNS_PER_WIN
    return DerivedPlayerStats(
        **rates.model_dump(),
        ops_plus_index=ops_plus_index,
        war_proxy=war_proxy,
    )


def derive_player_stats(
    records: Sequence[PlayerRecord],
) -> Tuple[List[DerivedPlayerStats], TeamAverages]:
    """Run the full pipeline over ``records``, preserving their order."""

    rates = [compute_rates(record) for record in records]
    team = summarize_team(rates)
    return [apply_league_relative(player, team) for player in rates], team
