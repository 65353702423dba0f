from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI
from starlette.requests import Request

from whoishiring.api.router import api_router
from whoishiring.core.config import get_settings
from whoishiring.core.telemetry import TelemetryRuntime, configure_logging, setup_telemetry, shutdown_telemetry
from whoishiring.jobs.sync import sync_data
from whoishiring.services.hn_client import HackerNewsClient
from whoishiring.services.repository import get_repository

settings = get_settings()
_telemetry_runtime: TelemetryRuntime | None = None
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    repository = get_repository()
    try:
        await repository.ensure_schema()
        if settings.sync_on_startup:
            # A failed sync propagates so the server never starts serving.
            client = HackerNewsClient(settings.hn_api_base_url, timeout_seconds=settings.http_timeout_seconds)
            await sync_data(client=client, repository=repository, settings=settings)
        yield
    finally:
        if _telemetry_runtime is not None:
            shutdown_telemetry(_telemetry_runtime)
        await repository.close()
        get_repository.cache_clear()


configure_logging(settings)
app = FastAPI(title=settings.app_name, lifespan=lifespan)
_telemetry_runtime = setup_telemetry(settings, app)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    started_at = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started_at) * 1000.0
    logger.info(
        "http request method=%s path=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


app.include_router(api_router)
