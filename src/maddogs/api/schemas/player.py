from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel

from maddogs.models import DerivedPlayerStats, TeamAverages


class PlayersResponse(BaseModel):
    sort_key: str
    team: TeamAverages
    players: List[DerivedPlayerStats]
    error: str | None = None


class LeadersResponse(BaseModel):
    leaders: Dict[str, DerivedPlayerStats]


class PlayerCreatedResponse(BaseModel):
    status: str
    name: str
