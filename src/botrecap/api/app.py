"""FastAPI 앱 팩토리 + exception handler + 스케줄러 lifespan."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from botrecap.api.deps import get_config
from botrecap.api.routes import activities, cache
from botrecap.exceptions import BotRecapError
from botrecap.logging_config import setup_logging
from botrecap.scheduler.core import SchedulerService
from botrecap.services.cache import MemoryCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = SchedulerService(get_config())
    try:
        scheduler.start()
    except Exception:
        logger.warning("Scheduler failed to start, no periodic rebuilds", exc_info=True)
    app.state.scheduler = scheduler
    yield
    scheduler.shutdown()


def create_app(memory_cache: MemoryCache | None = None) -> FastAPI:
    config = get_config()
    setup_logging(config.log_level)
    app = FastAPI(title="botrecap", version="0.1.0", lifespan=lifespan)
    if memory_cache is None:
        ttl = timedelta(seconds=config.dashboard_cache_ttl_seconds)
        memory_cache = MemoryCache(default_ttl=ttl)
    app.state.memory_cache = memory_cache

    app.include_router(cache.router, prefix="/api", tags=["cache"])
    app.include_router(activities.router, prefix="/api/activities", tags=["activities"])

    @app.exception_handler(BotRecapError)
    async def handle_botrecap_error(request: Request, exc: BotRecapError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": str(exc)},
        )

    return app


app = create_app()
