from __future__ import annotations

import asyncio

import pytest

from maddogs.errors import DeleteError, FetchError, InsertError
from maddogs.models import PlayerInput, PlayerRecord


class FakeGateway:
    """In-memory stand-in for the data service with switchable failures."""

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self.next_id = 1
        self.calls: list[str] = []
        self.fail_list: str | None = None
        self.fail_insert: str | None = None
        self.fail_delete: str | None = None
        self.insert_gate: asyncio.Event | None = None
        self.delete_gate: asyncio.Event | None = None
        self.list_gate: asyncio.Event | None = None

    def seed(self, name: str, **stats: int) -> int:
        player_id = self.next_id
        self.rows[player_id] = PlayerInput(name=name, **stats).model_dump()
        self.next_id += 1
        return player_id

    async def list_players(self) -> list[PlayerRecord]:
        self.calls.append("list")
        if self.list_gate is not None:
            await self.list_gate.wait()
        if self.fail_list:
            raise FetchError(self.fail_list)
        return [PlayerRecord(id=player_id, **row) for player_id, row in sorted(self.rows.items())]

    async def insert_player(self, player: PlayerInput) -> None:
        self.calls.append("insert")
        if self.insert_gate is not None:
            await self.insert_gate.wait()
        if self.fail_insert:
            raise InsertError(self.fail_insert)
        self.rows[self.next_id] = player.model_dump()
        self.next_id += 1

    async def delete_player(self, player_id: int) -> None:
        self.calls.append("delete")
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if self.fail_delete:
            raise DeleteError(self.fail_delete)
        self.rows.pop(player_id, None)


KIM = {"pa": 20, "hits": 6, "double": 1, "triple": 0, "homerun": 1, "walks": 4, "sb": 2, "sb_fail": 0}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
