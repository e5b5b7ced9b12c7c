"""스케줄러 job 함수 -- 캐시 rebuild."""

import asyncio
import logging

from botrecap.config import AppConfig
from botrecap.exceptions import CacheBuildError
from botrecap.services import factory

logger = logging.getLogger(__name__)


async def run_rebuild_job(config: AppConfig) -> None:
    """캐시 rebuild. 실패는 status.json에 이미 기록되므로 로깅만 한다."""
    try:
        activities = await asyncio.to_thread(factory.run_cache_build, config)
    except CacheBuildError:
        logger.exception("Scheduled cache rebuild failed")
        return
    logger.info("Scheduled cache rebuild completed: %d activities", len(activities))
