from __future__ import annotations

from typing import Any

import pytest

from whoishiring.schemas.items import HNItem
from whoishiring.services.hn_client import RemoteFetchError, RemoteItemMissingError
from whoishiring.services.store import InMemoryRepository


class FakeHackerNewsClient:
    def __init__(self, items: dict[int, dict[str, Any]] | None = None, submissions: list[int] | None = None) -> None:
        self.items = items or {}
        self.submissions = submissions or []
        self.fetched: list[int] = []
        self.failing_ids: set[int] = set()

    async def get_item(self, item_id: int) -> HNItem:
        self.fetched.append(item_id)
        if item_id in self.failing_ids:
            raise RemoteFetchError(f"request failed for /item/{item_id}.json")
        if item_id not in self.items:
            raise RemoteItemMissingError(f"no item found at /item/{item_id}.json")
        return HNItem.model_validate({"id": item_id, **self.items[item_id]})

    async def get_submissions(self, account: str) -> list[int]:
        return list(self.submissions)


@pytest.fixture
def hn_client() -> FakeHackerNewsClient:
    return FakeHackerNewsClient()


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()
