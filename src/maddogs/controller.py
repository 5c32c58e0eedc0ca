"""Dashboard controller: owns the player snapshot, form state and derived stats.

Every mutation goes through the gateway and is followed by a fresh listing;
the snapshot is replaced wholesale, never patched. Derived stats are rebuilt
only when the snapshot object changes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from maddogs.config.metrics import DEFAULT_SORT_KEY, LEADER_KEYS, get_metric
from maddogs.errors import DeleteError, FetchError, InsertError, ValidationError
from maddogs.gateway import PlayersGateway
from maddogs.models import DerivedPlayerStats, PlayerForm, PlayerInput, PlayerRecord, TeamAverages
from maddogs.stats import derive_player_stats, leaderboard, sort_players


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)


class DashboardController:
    def __init__(self, gateway: PlayersGateway, *, sort_key: str = DEFAULT_SORT_KEY):
        get_metric(sort_key)
        self.gateway = gateway
        self.sort_key = sort_key
        self.players: Tuple[PlayerRecord, ...] = ()
        self.form = PlayerForm()
        self.last_error: Optional[str] = None
        self._derived_source: Optional[Tuple[PlayerRecord, ...]] = None
        self._derived: List[DerivedPlayerStats] = []
        self._team = TeamAverages()
        self._refresh_lock = asyncio.Lock()
        self._submit_lock = asyncio.Lock()
        self._delete_locks: Dict[int, asyncio.Lock] = {}

    # -- reads -----------------------------------------------------------

    def _ensure_derived(self) -> None:
        if self._derived_source is self.players:
            return
        self._derived, self._team = derive_player_stats(self.players)
        self._derived_source = self.players

    def derived(self) -> List[DerivedPlayerStats]:
        self._ensure_derived()
        return list(self._derived)

    def team(self) -> TeamAverages:
        self._ensure_derived()
        return self._team

    def sorted_players(self, key: Optional[str] = None) -> List[DerivedPlayerStats]:
        return sort_players(self.derived(), key or self.sort_key)

    def leaders(self) -> Dict[str, DerivedPlayerStats]:
        return leaderboard(self.derived(), LEADER_KEYS)

    def set_sort_key(self, key: str) -> None:
        get_metric(key)
        self.sort_key = key

    # -- form ------------------------------------------------------------

    def update_form(self, values: Mapping[str, Any]) -> PlayerForm:
        self.form = PlayerForm.model_validate({**self.form.model_dump(), **values})
        return self.form

    def reset_form(self) -> None:
        self.form = PlayerForm()

    # -- gateway round trips ----------------------------------------------

    async def refresh(self) -> bool:
        """Reload the snapshot. Returns False and keeps the old one on failure."""

        async with self._refresh_lock:
            try:
                players = await self.gateway.list_players()
            except FetchError as exc:
                logger.error("Error fetching players: %s", exc.message)
                self.last_error = exc.message
                return False
            self.players = tuple(players)
            self.last_error = None
            return True

    async def insert(self, player: PlayerInput) -> bool:
        """Insert a player without touching the form state.

        Returns False when another save is still in flight. Raises
        ValidationError for an empty name and InsertError when the data service
        refuses the row.
        """

        if not player.name.strip():
            raise ValidationError("Please enter a player name.")
        if self._submit_lock.locked():
            logger.warning("Ignoring duplicate save for %r while one is in flight", player.name)
            return False
        async with self._submit_lock:
            try:
                await self.gateway.insert_player(player)
            except InsertError as exc:
                logger.warning("Insert failed for %r: %s", player.name, exc.message)
                raise
        await self.refresh()
        return True

    async def submit(self, form: Optional[PlayerForm] = None) -> bool:
        """Insert the form as a new player and clear it on success.

        A submit rejected as a duplicate or as invalid leaves the form alone,
        so the form of a save still in flight is kept for retry if it fails.
        """

        if self._submit_lock.locked():
            name = (form or self.form).name
            logger.warning("Ignoring duplicate submit for %r while one is in flight", name)
            return False
        if form is not None:
            self.form = form
        submitted = self.form
        inserted = await self.insert(submitted.to_input())
        if inserted and self.form is submitted:
            self.reset_form()
        return inserted

    async def delete(self, player_id: int, *, confirmed: bool = False) -> bool:
        """Delete a player once the user has confirmed. Raises DeleteError."""

        if not confirmed:
            return False
        lock = self._delete_locks.setdefault(player_id, asyncio.Lock())
        if lock.locked():
            logger.warning("Ignoring duplicate delete for id=%s while one is in flight", player_id)
            return False
        try:
            async with lock:
                try:
                    await self.gateway.delete_player(player_id)
                except DeleteError as exc:
                    logger.warning("Delete failed for id=%s: %s", player_id, exc.message)
                    raise DeleteError("Delete failed.") from exc
        finally:
            self._delete_locks.pop(player_id, None)
        await self.refresh()
        return True
