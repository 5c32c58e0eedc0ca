"""Canonical player models."""

from .player import (
    DerivedPlayerStats,
    PlayerForm,
    PlayerInput,
    PlayerRates,
    PlayerRecord,
    TeamAverages,
)

__all__ = [
    "DerivedPlayerStats",
    "PlayerForm",
    "PlayerInput",
    "PlayerRates",
    "PlayerRecord",
    "TeamAverages",
]
