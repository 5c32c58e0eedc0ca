"""Access to the external data service that stores players."""

from __future__ import annotations

from typing import List, Protocol

from maddogs.models import PlayerInput, PlayerRecord

from .rest import COLLECTION, RestPlayersGateway


class PlayersGateway(Protocol):
    """What the dashboard needs from the data service.

    ``list_players`` returns rows ordered by ascending ``id`` and raises
    FetchError; ``insert_player`` raises InsertError; ``delete_player`` raises
    DeleteError and treats an unknown id as success.
    """

    async def list_players(self) -> List[PlayerRecord]: ...

    async def insert_player(self, player: PlayerInput) -> None: ...

    async def delete_player(self, player_id: int) -> None: ...


__all__ = ["COLLECTION", "PlayersGateway", "RestPlayersGateway"]
