from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Any

import asyncpg  # type: ignore[import-untyped]
from asyncpg import exceptions as pg_exc

from whoishiring.core.config import get_settings

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base repository error."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database is unavailable or not configured."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when the requested entity does not exist."""


class RepositoryConflictError(RepositoryError):
    """Raised when an insert violates a uniqueness constraint."""


JOB_STATUSES = {"active", "dead", "deleted"}

SCHEMA_SQL = """
create table if not exists stories (
  id bigserial primary key,
  hn_id bigint not null unique,
  title text not null,
  created_at timestamptz,
  inserted_at timestamptz not null default now()
);

create table if not exists jobs (
  id bigserial primary key,
  hn_id bigint not null unique,
  story_id bigint not null references stories (id),
  text text not null default '',
  posted_at timestamptz,
  status text not null check (status in ('active', 'dead', 'deleted')),
  inserted_at timestamptz not null default now()
);

create index if not exists jobs_story_id_hn_id_idx on jobs (story_id, hn_id);
"""


class PostgresRepository:
    def __init__(self, database_url: str | None, min_pool_size: int, max_pool_size: int) -> None:
        self.database_url = database_url
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self._pool: asyncpg.Pool | None = None

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def ensure_schema(self) -> None:
        pool = await self._get_pool()
        try:
            await pool.execute(SCHEMA_SQL)
        except pg_exc.PostgresError as exc:
            raise RepositoryError("failed to apply schema") from exc

    async def latest_story(self) -> dict[str, Any]:
        pool = await self._get_pool()
        row = await self._fetchrow(
            pool,
            """
            select id, hn_id, title, created_at
            from stories
            order by id desc
            limit 1
            """,
        )
        if row is None:
            raise RepositoryNotFoundError("no hiring story stored")
        return self._story_row_to_dict(row)

    async def get_story(self, *, hn_id: int) -> dict[str, Any]:
        pool = await self._get_pool()
        row = await self._fetchrow(
            pool,
            """
            select id, hn_id, title, created_at
            from stories
            where hn_id = $1
            """,
            hn_id,
        )
        if row is None:
            raise RepositoryNotFoundError(f"hiring story {hn_id} not found")
        return self._story_row_to_dict(row)

    async def create_story(self, *, hn_id: int, title: str, created_at: datetime | None) -> dict[str, Any]:
        pool = await self._get_pool()
        row = await self._fetchrow(
            pool,
            """
            insert into stories (hn_id, title, created_at)
            values ($1, $2, $3)
            returning id, hn_id, title, created_at
            """,
            hn_id,
            title,
            created_at,
        )
        if row is None:  # pragma: no cover - insert ... returning always yields a row
            raise RepositoryError(f"failed to create hiring story {hn_id}")
        return self._story_row_to_dict(row)

    async def existing_job_ids(self, *, story_id: int) -> set[int]:
        pool = await self._get_pool()
        try:
            rows = await pool.fetch("select hn_id from jobs where story_id = $1", story_id)
        except pg_exc.PostgresError as exc:
            raise RepositoryError("failed to select job ids") from exc
        return {int(row["hn_id"]) for row in rows}

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

        pool = await self._get_pool()
        row = await self._fetchrow(
            pool,
            """
            insert into jobs (hn_id, story_id, text, posted_at, status)
            values ($1, $2, $3, $4, $5)
            returning id, hn_id, story_id, text, posted_at, status
            """,
            hn_id,
            story_id,
            text,
            posted_at,
            status,
        )
        if row is None:  # pragma: no cover - insert ... returning always yields a row
            raise RepositoryError(f"failed to create hiring job {hn_id}")
        return self._job_row_to_dict(row)

    async def next_job(self, *, story_hn_id: int, after: int) -> dict[str, Any]:
        pool = await self._get_pool()
        row = await self._fetchrow(
            pool,
            """
            select j.id, j.hn_id, j.story_id, j.text, j.posted_at, j.status
            from jobs j
            join stories s on s.id = j.story_id
            where s.hn_id = $1
              and j.hn_id > $2
            order by j.hn_id asc
            limit 1
            """,
            story_hn_id,
            after,
        )
        if row is None:
            raise RepositoryNotFoundError(f"no hiring job after {after} in story {story_hn_id}")
        return self._job_row_to_dict(row)

    async def previous_job(self, *, story_hn_id: int, before: int) -> dict[str, Any]:
        pool = await self._get_pool()
        row = await self._fetchrow(
            pool,
            """
            select j.id, j.hn_id, j.story_id, j.text, j.posted_at, j.status
            from jobs j
            join stories s on s.id = j.story_id
            where s.hn_id = $1
              and j.hn_id < $2
            order by j.hn_id desc
            limit 1
            """,
            story_hn_id,
            before,
        )
        if row is None:
            raise RepositoryNotFoundError(f"no hiring job before {before} in story {story_hn_id}")
        return self._job_row_to_dict(row)

    async def _fetchrow(self, pool: asyncpg.Pool, query: str, *args: Any) -> asyncpg.Record | None:
        try:
            return await pool.fetchrow(query, *args)
        except pg_exc.UniqueViolationError as exc:
            raise RepositoryConflictError(str(exc)) from exc
        except pg_exc.PostgresError as exc:
            raise RepositoryError(str(exc)) from exc

    async def _get_pool(self) -> asyncpg.Pool:
        if not self.database_url:
            raise RepositoryUnavailableError("WIH_DATABASE_URL is required")

        if self._pool is not None:
            return self._pool

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self.database_url,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=15,
            )
            return self._pool
        except Exception as exc:  # pragma: no cover - depends on environment
            raise RepositoryUnavailableError("database unavailable") from exc

    @staticmethod
    def _story_row_to_dict(row: asyncpg.Record) -> dict[str, Any]:
        return {
            "id": int(row["id"]),
            "hn_id": int(row["hn_id"]),
            "title": row["title"],
            "created_at": row["created_at"],
        }

    @staticmethod
    def _job_row_to_dict(row: asyncpg.Record) -> dict[str, Any]:
        return {
            "id": int(row["id"]),
            "hn_id": int(row["hn_id"]),
            "story_id": int(row["story_id"]),
            "text": row["text"] or "",
            "posted_at": row["posted_at"],
            "status": row["status"],
        }


@lru_cache
def get_repository() -> Any:
    settings = get_settings()
    if not settings.database_url:
        from whoishiring.services.store import InMemoryRepository

        logger.warning("WIH_DATABASE_URL not set; using process-local in-memory storage")
        return InMemoryRepository()
    return PostgresRepository(
        database_url=settings.database_url,
        min_pool_size=settings.database_pool_min_size,
        max_pool_size=settings.database_pool_max_size,
    )
