"""Player models shared by the gateway, stat pipeline and dashboard."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator
from pydantic.config import ConfigDict


class PlayerInput(BaseModel):
    """Counting stats as entered in the form; the insert payload."""

    name: str
    pa: int = 0
    hits: int = 0
    double: int = 0
    triple: int = 0
    homerun: int = 0
    walks: int = 0
    sb: int = 0
    sb_fail: int = 0

    model_config = ConfigDict(frozen=True)

    @field_validator("sb_fail", mode="before")
    @classmethod
    def _missing_sb_fail_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class PlayerRecord(PlayerInput):
    """Row of the ``players`` collection; ``id`` is assigned by the data service."""

    id: int


class PlayerRates(PlayerRecord):
    at_bats: int
    singles: int
    total_bases: int
    avg: float
    obp: float
    slg: float
    ops: float
    stolen_base_attempts: int
    stolen_base_rate: float
    runs_created: float


class DerivedPlayerStats(PlayerRates):
    """Per-player rates plus the team-relative metrics. Never persisted."""

    ops_plus_index: float
    war_proxy: float


class TeamAverages(BaseModel):
    player_count: int = 0
    team_avg_avg: float = 0.0
    team_avg_ops: float = 0.0
    team_avg_rc: float = 0.0

    model_config = ConfigDict(frozen=True)


class PlayerForm(BaseModel):
    """Mutable form state held by the dashboard controller."""

    name: str = ""
    pa: int = 0
    hits: int = 0
    double: int = 0
    triple: int = 0
    homerun: int = 0
    walks: int = 0
    sb: int = 0
    sb_fail: int = 0

    def to_input(self) -> PlayerInput:
        return PlayerInput(**self.model_dump())
