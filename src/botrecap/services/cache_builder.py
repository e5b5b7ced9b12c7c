"""캐시 빌드 파이프라인: 수집 → 캐시 쓰기 → status 기록.

성공/실패 모두 status.json을 남긴다. 실패는 CacheBuildError로 감싸 호출자(API, CLI,
스케줄러)에게 전달한다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from botrecap.exceptions import CacheBuildError
from botrecap.models import Activity
from botrecap.services.cache import ActivityCache
from botrecap.services.orchestrator import ActivityOrchestrator
from botrecap.services.status import StatusStore

logger = logging.getLogger(__name__)


class CacheBuilder:
    def __init__(
        self,
        orchestrator: ActivityOrchestrator,
        cache: ActivityCache,
        status_store: StatusStore,
    ) -> None:
        self._orchestrator = orchestrator
        self._cache = cache
        self._status_store = status_store

    def build(
        self,
        since: str | None = None,
        progress: Callable[[str], None] | None = None,
    ) -> list[Activity]:
        # 어떤 실패든 status.json에 남긴다
        try:
            activities = self._orchestrator.build(since, progress=progress)
            self._cache.write(activities)
        except Exception as e:
            logger.error("Cache build failed: %s", e)
            self._status_store.record_error(str(e))
            raise CacheBuildError(e) from e

        self._status_store.record_success(len(activities))
        logger.info("Cache built successfully at %s", self._cache.path)
        return activities
