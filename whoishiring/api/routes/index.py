import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status as http_status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from whoishiring.schemas.items import JobOut, StoryOut
from whoishiring.services.pagination import cursor_param, select_job
from whoishiring.services.repository import RepositoryError, get_repository

router = APIRouter()
logger = logging.getLogger(__name__)
INTERNAL_ERROR = "Internal Server Error"
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    after: str | None = Query(default=None),
    before: str | None = Query(default=None),
    repository=Depends(get_repository),
) -> HTMLResponse:
    try:
        story = StoryOut(**await repository.latest_story())
    except RepositoryError as exc:
        logger.error("failed to get latest story. %s", exc)
        raise HTTPException(status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR) from exc
    logger.info("found hiring story -- %s [%s]", story.title, story.hn_id)

    try:
        job = JobOut(
            **await select_job(
                repository,
                story_hn_id=story.hn_id,
                after=cursor_param(after),
                before=cursor_param(before),
            )
        )
    except RepositoryError as exc:
        logger.error("failed to select hiring job. %s", exc)
        raise HTTPException(status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR) from exc
    logger.info("found hiring job [%s]", job.hn_id)

    return templates.TemplateResponse(request, "base.html", {"story": story, "job": job})
