from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any

from whoishiring.schemas.items import HNItem, JobStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestResult:
    story_hn_id: int
    kids_seen: int = 0
    skipped: int = 0
    inserted: list[int] = field(default_factory=list)


def derive_job_status(item: HNItem) -> JobStatus:
    if item.deleted:
        return "deleted"
    if item.dead:
        return "dead"
    return "active"


async def ingest_story_jobs(story_hn_id: int, *, client: Any, repository: Any) -> IngestResult:
    """Store every child of the story that is not stored yet.

    Children are processed in the order the API returns them. The first fetch
    or persistence error stops the run; jobs stored before it are kept.
    """
    logger.info("process jobs for hiring story id %s", story_hn_id)
    story_item = await client.get_item(story_hn_id)
    story = await repository.get_story(hn_id=story_hn_id)
    saved_ids = await repository.existing_job_ids(story_id=story["id"])

    result = IngestResult(story_hn_id=story_hn_id, kids_seen=len(story_item.kids))
    for kid_id in story_item.kids:
        if kid_id in saved_ids:
            result.skipped += 1
            continue

        item = await client.get_item(kid_id)
        await repository.create_job(
            hn_id=item.id,
            story_id=story["id"],
            text=item.text,
            posted_at=item.time,
            status=derive_job_status(item),
        )
        saved_ids.add(item.id)
        result.inserted.append(item.id)
        logger.info("added new hiring job %s", item.id)

    return result
