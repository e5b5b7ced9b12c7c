"""빌드 상태 리포트(status.json) 관리 + 캐시 헬스 체크."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from botrecap.exceptions import CacheHealthError
from botrecap.models import (
    BuildStatus,
    CacheEntry,
    StatusReport,
    save_json,
    status_report_from_dict,
    status_report_to_dict,
)
from botrecap.services.date_utils import parse_iso, to_iso, utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_HOURS = 12.0


class StatusStore:
    """data/cache/status.json 읽기/쓰기. 실패 기록 시에도 마지막 성공 정보는 유지."""

    def __init__(self, path: Path, clock: Callable[[], datetime] = utc_now) -> None:
        self._path = path
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load_raw(self) -> dict:
        """파일 내용을 그대로 반환. 없거나 깨졌으면 예외 (호출자가 처리)."""
        with open(self._path, encoding="utf-8") as f:
            return json.load(f)

    def load(self) -> StatusReport | None:
        if not self._path.exists():
            return None
        try:
            return status_report_from_dict(self.load_raw())
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable status file %s: %s", self._path, e)
            return None

    def record_success(self, activities_count: int) -> StatusReport:
        now = to_iso(self._clock())
        report = StatusReport(
            status=BuildStatus.SUCCESS,
            last_successful_update=now,
            last_attempt=now,
            activities_count=activities_count,
        )
        self._save(report)
        return report

    def record_error(self, error: str) -> StatusReport:
        with self._lock:
            previous = self.load()
        report = StatusReport(
            status=BuildStatus.ERROR,
            last_successful_update=previous.last_successful_update if previous else None,
            last_attempt=to_iso(self._clock()),
            activities_count=previous.activities_count if previous else None,
            error=error,
        )
        self._save(report)
        return report

    def _save(self, report: StatusReport) -> None:
        with self._lock:
            save_json(status_report_to_dict(report), self._path)
        logger.debug("Status written: %s (%s)", self._path, report.status.value)


def check_cache_health(
    report: StatusReport | None,
    entry: CacheEntry | None,
    *,
    max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
    now: datetime | None = None,
) -> float:
    """마지막 성공 이후 경과 시간(hours)을 반환. stale이거나 비어 있으면 CacheHealthError."""
    if report is None:
        raise CacheHealthError("No status report found")
    if not report.last_successful_update:
        raise CacheHealthError("Cache has never been updated successfully")

    now = now or utc_now()
    hours = (now - parse_iso(report.last_successful_update)).total_seconds() / 3600
    if hours > max_age_hours:
        raise CacheHealthError(f"Cache is stale! Last update was {hours:.2f} hours ago")
    if entry is None or not entry.activities:
        raise CacheHealthError("Cache contains no activities!")
    return hours
