from __future__ import annotations

import asyncio

import pytest

from whoishiring.core.config import Settings
from whoishiring.jobs.resolver import ResolutionError
from whoishiring.jobs.sync import sync_data


def test_sync_resolves_story_from_first_three_submissions_and_ingests(hn_client, repository) -> None:
    hn_client.submissions = [41000001, 41000002, 41000003, 40000002]
    hn_client.items = {
        41000001: {"title": "Ask HN: Who wants to be hired? (October 2026)"},
        41000002: {"title": "Ask HN: Who is hiring? (Month Year)", "kids": [41000120, 41000110]},
        41000003: {"title": "Ask HN: Freelancer? Seeking freelancer? (October 2026)"},
        41000110: {"text": "first"},
        41000120: {"text": "second", "dead": True},
    }

    result = asyncio.run(sync_data(client=hn_client, repository=repository, settings=Settings()))

    assert result.story_hn_id == 41000002
    assert sorted(result.inserted) == [41000110, 41000120]
    assert asyncio.run(repository.latest_story())["hn_id"] == 41000002


def test_sync_only_considers_configured_candidate_count(hn_client, repository) -> None:
    hn_client.submissions = [1, 2, 3, 4]
    hn_client.items = {
        1: {"title": "Ask HN: Who wants to be hired?"},
        2: {"title": "Ask HN: Freelancer?"},
        3: {"title": "Launch HN: Something"},
        4: {"title": "Ask HN: Who is hiring? (older)", "kids": []},
    }

    with pytest.raises(ResolutionError):
        asyncio.run(sync_data(client=hn_client, repository=repository, settings=Settings()))

    assert 4 not in hn_client.fetched
    assert repository.stories == {}


def test_second_sync_adds_only_new_jobs(hn_client, repository) -> None:
    hn_client.submissions = [41000002, 41000001, 41000000]
    hn_client.items = {
        41000002: {"title": "Ask HN: Who is hiring? (October 2026)", "kids": [41000110]},
        41000110: {"text": "first"},
        41000140: {"text": "later"},
    }
    settings = Settings()
    asyncio.run(sync_data(client=hn_client, repository=repository, settings=settings))

    hn_client.items[41000002]["kids"] = [41000140, 41000110]
    result = asyncio.run(sync_data(client=hn_client, repository=repository, settings=settings))

    assert result.inserted == [41000140]
    assert len(repository.stories) == 1
    assert len(repository.jobs) == 2
