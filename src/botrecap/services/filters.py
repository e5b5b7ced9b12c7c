"""대시보드용 Activity 필터 (type, status, 기간)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from botrecap.models import Activity, ActivityKind
from botrecap.services.date_utils import parse_iso


@dataclass(frozen=True)
class ActivityFilter:
    kind: ActivityKind | None = None
    status: str | None = None
    start: date | None = None  # inclusive
    end: date | None = None  # inclusive

    def matches(self, activity: Activity) -> bool:
        if self.kind is not None and activity.kind is not self.kind:
            return False
        if self.status is not None and activity.status.value != self.status:
            return False
        if self.start is not None or self.end is not None:
            ts = parse_iso(activity.timestamp)
            if self.start is not None and ts < _day_start(self.start):
                return False
            if self.end is not None and ts > _day_end(self.end):
                return False
        return True


def _day_start(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def _day_end(d: date) -> datetime:
    return datetime.combine(d, time.max, tzinfo=timezone.utc)


def filter_activities(activities: list[Activity], criteria: ActivityFilter) -> list[Activity]:
    return [a for a in activities if criteria.matches(a)]


def count_by_status(activities: list[Activity]) -> dict[str, int]:
    """status별 개수 (차트용)."""
    counts: dict[str, int] = {}
    for a in activities:
        counts[a.status.value] = counts.get(a.status.value, 0) + 1
    return counts
