from __future__ import annotations

import logging
from typing import Any

from whoishiring.services.hn_client import RemoteItemMissingError
from whoishiring.services.repository import RepositoryNotFoundError

logger = logging.getLogger(__name__)

HIRING_STORY_PREFIX = "Ask HN: Who is hiring?"


class ResolutionError(Exception):
    """Raised when none of the candidate ids is a hiring story."""


async def resolve_current_story(
    candidate_ids: list[int],
    *,
    client: Any,
    repository: Any,
    title_prefix: str = HIRING_STORY_PREFIX,
) -> int:
    """Return the Hacker News id of the hiring story that ingestion should target.

    The stored latest story is reused while it is still among ``candidate_ids``.
    Otherwise the candidates are fetched in order and the first one whose title
    starts with ``title_prefix`` is stored as the new latest story.
    """
    try:
        latest = await repository.latest_story()
    except RepositoryNotFoundError:
        logger.info("hiring story not found in db")
        latest = None

    if latest is not None:
        if latest["hn_id"] in candidate_ids:
            return latest["hn_id"]
        logger.info("expected story id %s not found in %s. will update...", latest["hn_id"], candidate_ids)

    for candidate_id in candidate_ids:
        try:
            item = await client.get_item(candidate_id)
        except RemoteItemMissingError:
            logger.info("candidate story id %s not found upstream; skipping", candidate_id)
            continue
        if not item.title.startswith(title_prefix):
            continue

        story = await repository.create_story(hn_id=item.id, title=item.title, created_at=item.time)
        logger.info("added new hiring story %s: %s", story["hn_id"], story["title"])
        return story["hn_id"]

    raise ResolutionError(f"could not add new hiring story from ids {candidate_ids}")
