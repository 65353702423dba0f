from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

JobStatus = Literal["active", "dead", "deleted"]


class HNItem(BaseModel):
    """Item payload from the Hacker News API.

    Stories and comments share one shape; fields absent for a given item kind
    fall back to their defaults.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    text: str = ""
    time: datetime | None = None
    dead: bool = False
    deleted: bool = False
    kids: list[int] = Field(default_factory=list)


class HNUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    submitted: list[int] = Field(default_factory=list)


class StoryOut(BaseModel):
    id: int
    hn_id: int
    title: str
    created_at: datetime | None = None


class JobOut(BaseModel):
    id: int
    hn_id: int
    story_id: int
    text: str = ""
    posted_at: datetime | None = None
    status: JobStatus = "active"
