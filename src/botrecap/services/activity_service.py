"""Activity 조회 경로 — use_cache 플래그에 따라 파일 캐시 또는 실시간 수집."""

from __future__ import annotations

import logging
from collections.abc import Callable

from botrecap.models import Activity
from botrecap.services.cache import ActivityCache

logger = logging.getLogger(__name__)

# since → GitHub에서 새로 수집한 Activity 목록
LiveFetch = Callable[[str | None], list[Activity]]


class ActivityService:
    def __init__(
        self,
        fetch_live: LiveFetch,
        cache: ActivityCache,
        *,
        use_cache: bool = True,
    ) -> None:
        self._fetch_live = fetch_live
        self._cache = cache
        self._use_cache = use_cache

    def fetch_bot_activities(self, since: str | None = None) -> list[Activity]:
        """캐시가 유효하면 캐시, 아니면 GitHub에서 수집. 수집 에러는 그대로 전파.

        fetch_live는 캐시 miss일 때만 호출되므로 토큰 검증도 그때 일어난다.
        """
        if not self._use_cache:
            logger.info("Cache disabled, fetching from GitHub")
            return self._fetch_live(since)

        cached = self._cache.read()
        if cached is not None:
            logger.info("Using cached activities (%d)", len(cached))
            return cached
        logger.info("No valid cache found, fetching from GitHub")
        return self._fetch_live(since)
