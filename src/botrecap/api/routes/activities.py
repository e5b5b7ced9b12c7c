"""대시보드 읽기 엔드포인트 — Activity 목록 + 필터 + status별 집계."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from botrecap.api.deps import get_config, get_memory_cache
from botrecap.config import AppConfig
from botrecap.models import ActivityKind, activity_to_dict
from botrecap.services import factory
from botrecap.services.cache import MemoryCache
from botrecap.services.filters import ActivityFilter, count_by_status, filter_activities

logger = logging.getLogger(__name__)

router = APIRouter()

ACTIVITIES_KEY = "bot-activities"


def _load_activities(config: AppConfig, memory_cache: MemoryCache):
    cached = memory_cache.get(ACTIVITIES_KEY)
    if cached is not None:
        return cached
    activities = factory.build_activity_service(config).fetch_bot_activities()
    memory_cache.set(ACTIVITIES_KEY, activities)
    return activities


@router.get("")
def list_activities(
    type: ActivityKind | None = Query(default=None),
    status: str | None = Query(default=None),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    config: AppConfig = Depends(get_config),
    memory_cache: MemoryCache = Depends(get_memory_cache),
):
    activities = _load_activities(config, memory_cache)
    criteria = ActivityFilter(kind=type, status=status, start=start, end=end)
    filtered = filter_activities(activities, criteria)
    return {
        "activities": [activity_to_dict(a) for a in filtered],
        "counts": count_by_status(filtered),
    }
