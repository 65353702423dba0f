from __future__ import annotations

from typing import Any

# Largest value a bigint column can hold.
MAX_CURSOR = 2**63 - 1


def cursor_param(raw: str | None, default: int = 0) -> int:
    """Parse a cursor query value; absent or malformed input yields ``default``."""
    if raw is None:
        return default
    if not (raw.isascii() and raw.isdigit()):
        return default
    parsed = int(raw)
    return parsed if parsed <= MAX_CURSOR else default


async def select_job(repository: Any, *, story_hn_id: int, after: int = 0, before: int = 0) -> dict[str, Any]:
    """Return the single job to display for a cursor within one story.

    A positive ``before`` wins and walks backwards; otherwise the walk goes
    forwards from ``after``, where 0 means the first job of the story.
    Raises ``RepositoryNotFoundError`` when the walk runs off either end.
    """
    if before > 0:
        return await repository.previous_job(story_hn_id=story_hn_id, before=before)
    return await repository.next_job(story_hn_id=story_hn_id, after=max(0, after))
