"""Pydantic models for API I/O."""

from .player import LeadersResponse, PlayerCreatedResponse, PlayersResponse

__all__ = [
    "LeadersResponse",
    "PlayerCreatedResponse",
    "PlayersResponse",
]
