from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from whoishiring.schemas.items import HNItem, HNUser


class RemoteFetchError(Exception):
    """Raised when a Hacker News API call fails or returns an undecodable body."""


class RemoteItemMissingError(RemoteFetchError):
    """Raised when the API answers an item or user lookup with a null body."""


class HackerNewsClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def get_item(self, item_id: int) -> HNItem:
        payload = await self._get_json(f"/item/{item_id}.json")
        try:
            return HNItem.model_validate(payload)
        except ValidationError as exc:
            raise RemoteFetchError(f"invalid item payload for id={item_id}") from exc

    async def get_submissions(self, account: str) -> list[int]:
        """Return the account's submitted item ids, most recent first."""
        payload = await self._get_json(f"/user/{account}.json")
        try:
            return HNUser.model_validate(payload).submitted
        except ValidationError as exc:
            raise RemoteFetchError(f"invalid user payload for account={account}") from exc

    async def _get_json(self, path: str) -> Any:
        try:
            if self._client is not None:
                response = await self._client.get(f"{self.base_url}{path}")
                response.raise_for_status()
                payload = response.json()
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.get(f"{self.base_url}{path}")
                    response.raise_for_status()
                    payload = response.json()
        except httpx.HTTPError as exc:
            raise RemoteFetchError(f"request failed for {path}: {exc}") from exc
        except ValueError as exc:
            raise RemoteFetchError(f"failed to decode response for {path}") from exc

        # The API answers unknown ids with a literal null body.
        if payload is None:
            raise RemoteItemMissingError(f"no item found at {path}")
        return payload
