"""Activity 캐시 — 파일 기반 영속 캐시 + 범위가 명시된 인메모리 TTL 캐시.

파일 캐시 읽기 실패(파일 없음, 깨진 JSON, 스키마 불일치, 만료)는 모두 miss로 취급하며
호출자에게 에러를 올리지 않는다.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from botrecap.models import (
    Activity,
    CacheEntry,
    activity_from_dict,
    activity_to_dict,
)
from botrecap.services.date_utils import parse_iso, to_iso, utc_now

logger = logging.getLogger(__name__)

DEFAULT_FILE_TTL = timedelta(hours=24)
DEFAULT_MEMORY_TTL = timedelta(minutes=5)

# 같은 의미의 타임스탬프 필드명 (빌드 스크립트 버전마다 다름)
WRITTEN_AT_KEYS = ("writtenAt", "timestamp", "lastUpdated")

Clock = Callable[[], datetime]


class ActivityCache:
    """마지막으로 성공한 Activity 배치를 JSON 파일에 보관."""

    def __init__(
        self,
        path: Path,
        ttl: timedelta = DEFAULT_FILE_TTL,
        clock: Clock = utc_now,
    ) -> None:
        self._path = path
        self._ttl = ttl
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    def load_entry(self) -> CacheEntry | None:
        """만료 여부와 무관하게 파일을 읽는다. 없거나 깨졌으면 None."""
        if not self._path.exists():
            logger.debug("Cache miss: %s does not exist", self._path)
            return None
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
            written_at = next(data[k] for k in WRITTEN_AT_KEYS if data.get(k))
            parse_iso(written_at)
            activities = [activity_from_dict(d) for d in data["activities"]]
        except (OSError, ValueError, KeyError, TypeError, AttributeError, StopIteration) as e:
            logger.warning("Ignoring unreadable cache %s: %s", self._path, e)
            return None
        return CacheEntry(activities=activities, written_at=written_at)

    def is_fresh(self, entry: CacheEntry) -> bool:
        age = self._clock() - parse_iso(entry.written_at)
        return age < self._ttl

    def read(self) -> list[Activity] | None:
        entry = self.load_entry()
        if entry is None:
            return None
        if not self.is_fresh(entry):
            logger.info("Cache is older than %s, ignoring it", self._ttl)
            return None
        logger.debug("Cache hit: %d activities", len(entry.activities))
        return entry.activities

    def write(self, activities: list[Activity]) -> CacheEntry:
        """기존 파일을 덮어쓴다. temp file + rename으로 반쯤 쓰인 파일을 남기지 않는다."""
        entry = CacheEntry(activities=activities, written_at=to_iso(self._clock()))
        payload = {
            "activities": [activity_to_dict(a) for a in activities],
            "writtenAt": entry.written_at,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info("Cache written: %s (%d activities)", self._path, len(activities))
        return entry


@dataclass
class _MemoryEntry:
    value: Any
    expires_at: datetime


class MemoryCache:
    """짧은 TTL의 key-value 캐시. 필요한 곳에 인스턴스를 직접 주입해서 쓴다."""

    def __init__(self, default_ttl: timedelta = DEFAULT_MEMORY_TTL, clock: Clock = utc_now) -> None:
        self._default_ttl = default_ttl
        self._clock = clock
        self._storage: dict[str, _MemoryEntry] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        expires_at = self._clock() + (ttl if ttl is not None else self._default_ttl)
        with self._lock:
            self._storage[key] = _MemoryEntry(value=value, expires_at=expires_at)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._storage.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                del self._storage[key]
                return None
            return entry.value

    def delete(self, key: str) -> None:
        with self._lock:
            self._storage.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()
