from __future__ import annotations

import asyncio
import logging
from typing import Any

from opentelemetry import trace

from whoishiring.core.config import Settings, get_settings
from whoishiring.core.telemetry import configure_logging, setup_telemetry, shutdown_telemetry
from whoishiring.jobs.ingest import IngestResult, ingest_story_jobs
from whoishiring.jobs.resolver import resolve_current_story
from whoishiring.services.hn_client import HackerNewsClient
from whoishiring.services.repository import get_repository

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


async def sync_data(*, client: Any, repository: Any, settings: Settings) -> IngestResult:
    """Resolve the current hiring story and store its new jobs.

    Every error propagates; callers treat a failed sync as fatal.
    """
    logger.info("starting data sync...")
    with tracer.start_as_current_span("sync.resolve_story") as span:
        submitted = await client.get_submissions(settings.hiring_account)
        candidate_ids = submitted[: settings.story_candidate_count]
        span.set_attribute("sync.candidate_ids", candidate_ids)
        story_hn_id = await resolve_current_story(
            candidate_ids,
            client=client,
            repository=repository,
            title_prefix=settings.story_title_prefix,
        )
        span.set_attribute("sync.story_hn_id", story_hn_id)

    with tracer.start_as_current_span("sync.ingest_jobs") as span:
        span.set_attribute("sync.story_hn_id", story_hn_id)
        result = await ingest_story_jobs(story_hn_id, client=client, repository=repository)
        span.set_attribute("sync.jobs_inserted", len(result.inserted))

    logger.info(
        "data sync complete story_hn_id=%s kids=%s skipped=%s inserted=%s",
        result.story_hn_id,
        result.kids_seen,
        result.skipped,
        len(result.inserted),
    )
    return result


async def run_sync() -> None:
    settings = get_settings()
    configure_logging(settings)
    telemetry_runtime = setup_telemetry(settings)
    repository = get_repository()
    client = HackerNewsClient(settings.hn_api_base_url, timeout_seconds=settings.http_timeout_seconds)
    try:
        await repository.ensure_schema()
        await sync_data(client=client, repository=repository, settings=settings)
    finally:
        await repository.close()
        shutdown_telemetry(telemetry_runtime)


def main() -> None:
    asyncio.run(run_sync())


if __name__ == "__main__":
    main()
