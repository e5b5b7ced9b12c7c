"""캐시 rebuild 트리거 + 마지막 빌드 status 조회."""

import logging
import secrets

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from botrecap.api.deps import get_config, get_memory_cache
from botrecap.config import AppConfig
from botrecap.exceptions import CacheBuildError
from botrecap.services import factory
from botrecap.services.cache import MemoryCache

logger = logging.getLogger(__name__)

router = APIRouter()


def _authorized(config: AppConfig, authorization: str | None) -> bool:
    if not config.cron_secret or authorization is None:
        return False
    return secrets.compare_digest(authorization, f"Bearer {config.cron_secret}")


@router.post("/rebuild-cache")
def rebuild_cache(
    authorization: str | None = Header(default=None),
    config: AppConfig = Depends(get_config),
    memory_cache: MemoryCache = Depends(get_memory_cache),
):
    if not _authorized(config, authorization):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    try:
        activities = factory.run_cache_build(config)
    except CacheBuildError as e:
        logger.error("Error rebuilding cache: %s", e)
        return JSONResponse(status_code=500, content={"error": "Failed to rebuild cache"})

    memory_cache.clear()
    return {"message": "Cache rebuilt successfully", "activitiesCount": len(activities)}


@router.get("/status")
def get_status(config: AppConfig = Depends(get_config)):
    try:
        return factory.build_status_store(config).load_raw()
    except (OSError, ValueError) as e:
        logger.error("Failed to read status: %s", e)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to read cache status", "details": str(e)},
        )


@router.get("/scheduler")
def get_scheduler_status(request: Request):
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return {"state": "stopped", "jobs": []}
    return scheduler.status()
