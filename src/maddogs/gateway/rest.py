"""REST client for the hosted ``players`` collection (PostgREST conventions)."""

from __future__ import annotations

import logging
from typing import Any, List

import httpx
from pydantic import ValidationError as PydanticValidationError

from maddogs.config.settings import Settings
from maddogs.errors import DeleteError, FetchError, InsertError
from maddogs.models import PlayerInput, PlayerRecord


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

COLLECTION = "players"


def _error_message(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text or f"HTTP {response.status_code}"


class RestPlayersGateway:
    """List, insert and delete rows of the ``players`` collection over HTTP."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RestPlayersGateway":
        return cls(settings.data_url, settings.data_key, timeout=settings.timeout)

    async def __aenter__(self) -> "RestPlayersGateway":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_players(self) -> List[PlayerRecord]:
        try:
            response = await self._client.get(
                f"/{COLLECTION}",
                params={"select": "*", "order": "id.asc"},
            )
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not reach data service: {exc}") from exc
        if response.is_error:
            raise FetchError(_error_message(response))
        try:
            rows = response.json()
            return [PlayerRecord.model_validate(row) for row in rows]
        except (ValueError, TypeError, PydanticValidationError) as exc:
            raise FetchError(f"Malformed players payload: {exc}") from exc

    async def insert_player(self, player: PlayerInput) -> None:
        try:
            response = await self._client.post(
                f"/{COLLECTION}",
                json=[player.model_dump()],
                headers={"Prefer": "return=minimal"},
            )
        except httpx.HTTPError as exc:
            raise InsertError(f"Could not reach data service: {exc}") from exc
        if response.is_error:
            raise InsertError(_error_message(response))
        logger.info("Inserted player %r", player.name)

    async def delete_player(self, player_id: int) -> None:
        # A filter that matches nothing is still a success on the service side.
        try:
            response = await self._client.delete(
                f"/{COLLECTION}",
                params={"id": f"eq.{player_id}"},
            )
        except httpx.HTTPError as exc:
            raise DeleteError(f"Could not reach data service: {exc}") from exc
        if response.is_error:
            raise DeleteError(_error_message(response))
        logger.info("Deleted player id=%s", player_id)
