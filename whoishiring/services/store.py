from datetime import datetime
from typing import Any

from whoishiring.schemas.items import JobOut, StoryOut
from whoishiring.services.repository import (
    JOB_STATUSES,
    RepositoryConflictError,
    RepositoryError,
    RepositoryNotFoundError,
)


class InMemoryRepository:
    """Process-local story/job storage used when no database is configured."""

    def __init__(self) -> None:
        self.stories: dict[int, dict[str, Any]] = {}
        self.jobs: dict[int, dict[str, Any]] = {}
        self._next_story_id = 1
        self._next_job_id = 1

    async def close(self) -> None:
        return None

    async def ensure_schema(self) -> None:
        return None

    async def latest_story(self) -> dict[str, Any]:
        if not self.stories:
            raise RepositoryNotFoundError("no hiring story stored")
        return dict(self.stories[max(self.stories)])

    async def get_story(self, *, hn_id: int) -> dict[str, Any]:
        for story in self.stories.values():
            if story["hn_id"] == hn_id:
                return dict(story)
        raise RepositoryNotFoundError(f"hiring story {hn_id} not found")

    async def create_story(self, *, hn_id: int, title: str, created_at: datetime | None) -> dict[str, Any]:
        if any(story["hn_id"] == hn_id for story in self.stories.values()):
            raise RepositoryConflictError(f"hiring story {hn_id} already exists")

        story = StoryOut(id=self._next_story_id, hn_id=hn_id, title=title, created_at=created_at).model_dump()
        self.stories[story["id"]] = story
        self._next_story_id += 1
        return dict(story)

    async def existing_job_ids(self, *, story_id: int) -> set[int]:
        return {job["hn_id"] for job in self.jobs.values() if job["story_id"] == story_id}

    async def create_job(
        self,
        *,
        hn_id: int,
        story_id: int,
        text: str,
        posted_at: datetime | None,
        status: str,
    ) -> dict[str, Any]:
        if status not in JOB_STATUSES:
            raise RepositoryError(f"invalid job status: {status}")
        if story_id not in self.stories:
            raise RepositoryError(f"hiring story id {story_id} does not exist")
        if any(job["hn_id"] == hn_id for job in self.jobs.values()):
            raise RepositoryConflictError(f"hiring job {hn_id} already exists")

        job = JobOut(
            id=self._next_job_id,
            hn_id=hn_id,
            story_id=story_id,
            text=text,
            posted_at=posted_at,
            status=status,
        ).model_dump()
        self.jobs[job["id"]] = job
        self._next_job_id += 1
        return dict(job)

    async def next_job(self, *, story_hn_id: int, after: int) -> dict[str, Any]:
        candidates = [job for job in self._story_jobs(story_hn_id) if job["hn_id"] > after]
        if not candidates:
            raise RepositoryNotFoundError(f"no hiring job after {after} in story {story_hn_id}")
        return dict(min(candidates, key=lambda job: job["hn_id"]))

    async def previous_job(self, *, story_hn_id: int, before: int) -> dict[str, Any]:
        candidates = [job for job in self._story_jobs(story_hn_id) if job["hn_id"] < before]
        if not candidates:
            raise RepositoryNotFoundError(f"no hiring job before {before} in story {story_hn_id}")
        return dict(max(candidates, key=lambda job: job["hn_id"]))

    def _story_jobs(self, story_hn_id: int) -> list[dict[str, Any]]:
        story_ids = {story["id"] for story in self.stories.values() if story["hn_id"] == story_hn_id}
        return [job for job in self.jobs.values() if job["story_id"] in story_ids]
