from datetime import datetime, timedelta, timezone

import pytest

from botrecap.exceptions import CacheHealthError
from botrecap.models import BuildStatus, CacheEntry, StatusReport
from botrecap.services.status import StatusStore, check_cache_health

NOW = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path):
    return StatusStore(tmp_path / "cache" / "status.json", clock=lambda: NOW)


class TestStatusStore:
    def test_load_missing(self, store):
        assert store.load() is None
        with pytest.raises(OSError):
            store.load_raw()

    def test_record_success(self, store):
        store.record_success(5)
        assert store.load_raw() == {
            "status": "success",
            "lastSuccessfulUpdate": "2024-01-02T12:00:00.000Z",
            "lastAttempt": "2024-01-02T12:00:00.000Z",
            "activitiesCount": 5,
        }

    def test_record_error_keeps_last_success(self, store):
        """실패 기록 시 마지막 성공 정보는 유지."""
        store.record_success(5)
        report = store.record_error("GitHub API error: 500")

        assert report.status is BuildStatus.ERROR
        assert report.last_successful_update == "2024-01-02T12:00:00.000Z"
        assert report.activities_count == 5
        assert store.load_raw()["error"] == "GitHub API error: 500"

    def test_record_error_without_history(self, store):
        store.record_error("boom")
        raw = store.load_raw()
        assert raw == {
            "status": "error",
            "lastAttempt": "2024-01-02T12:00:00.000Z",
            "error": "boom",
        }

    def test_unreadable_file(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{broken")
        assert store.load() is None
        with pytest.raises(ValueError):
            store.load_raw()


def _report(hours_ago: float | None) -> StatusReport:
    last = None
    if hours_ago is not None:
        last = (NOW - timedelta(hours=hours_ago)).isoformat()
    return StatusReport(status=BuildStatus.SUCCESS, last_successful_update=last)


ENTRY = CacheEntry(activities=["a"], written_at="2024-01-02T11:00:00Z")


class TestCheckCacheHealth:
    def test_healthy(self):
        hours = check_cache_health(_report(2), ENTRY, now=NOW)
        assert hours == pytest.approx(2.0)

    def test_no_report(self):
        with pytest.raises(CacheHealthError, match="No status report"):
            check_cache_health(None, ENTRY, now=NOW)

    def test_never_succeeded(self):
        with pytest.raises(CacheHealthError, match="never been updated"):
            check_cache_health(_report(None), ENTRY, now=NOW)

    def test_stale(self):
        with pytest.raises(CacheHealthError, match="stale"):
            check_cache_health(_report(13), ENTRY, now=NOW)

    def test_custom_max_age(self):
        assert check_cache_health(_report(13), ENTRY, max_age_hours=24, now=NOW) > 12

    @pytest.mark.parametrize("entry", [None, CacheEntry(activities=[], written_at="x")])
    def test_empty_cache(self, entry):
        with pytest.raises(CacheHealthError, match="no activities"):
            check_cache_health(_report(1), entry, now=NOW)
