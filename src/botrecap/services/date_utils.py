"""ISO 8601 타임스탬프 유틸리티 함수."""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_iso(value: str) -> datetime:
    """'2024-01-01T00:00:00Z' → aware datetime. naive 값은 UTC로 간주."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso(value: datetime) -> str:
    """aware datetime → '2024-01-01T00:00:00.000Z' (GitHub since 파라미터 형식)."""
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def default_since(days: int, now: datetime | None = None) -> str:
    """now - days를 ISO 문자열로."""
    return to_iso((now or utc_now()) - timedelta(days=days))
