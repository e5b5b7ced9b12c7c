from unittest.mock import MagicMock, patch

import httpx
import pytest
import respx

from botrecap.exceptions import CacheBuildError, CredentialError, GitHubAPIError
from botrecap.models import Outcome, PRActivity
from botrecap.services import factory
from botrecap.services.cache import ActivityCache
from botrecap.services.cache_builder import CacheBuilder
from botrecap.services.status import StatusStore

ACTIVITY = PRActivity(
    id="pr-1-10",
    timestamp="2024-01-01T00:00:00Z",
    url="u",
    title="t",
    description="d",
    status=Outcome.SUCCESS,
)


@pytest.fixture
def cache(tmp_path):
    return ActivityCache(tmp_path / "cache" / "bot-activities.json")


@pytest.fixture
def status_store(tmp_path):
    return StatusStore(tmp_path / "cache" / "status.json")


class TestCacheBuilder:
    def test_success_writes_cache_and_status(self, cache, status_store):
        orchestrator = MagicMock()
        orchestrator.build.return_value = [ACTIVITY]

        result = CacheBuilder(orchestrator, cache, status_store).build()

        assert result == [ACTIVITY]
        assert cache.read() == [ACTIVITY]
        report = status_store.load()
        assert report.status.value == "success"
        assert report.activities_count == 1

    def test_passes_since_and_progress(self, cache, status_store):
        orchestrator = MagicMock()
        orchestrator.build.return_value = []
        progress = MagicMock()
        CacheBuilder(orchestrator, cache, status_store).build("2024-01-01T00:00:00Z", progress)
        orchestrator.build.assert_called_once_with("2024-01-01T00:00:00Z", progress=progress)

    def test_failure_records_error_and_keeps_old_cache(self, cache, status_store):
        """수집 실패 시 기존 캐시는 그대로, status만 error로."""
        cache.write([ACTIVITY])
        status_store.record_success(1)
        orchestrator = MagicMock()
        orchestrator.build.side_effect = GitHubAPIError(500, "Internal Server Error")

        with pytest.raises(CacheBuildError) as exc_info:
            CacheBuilder(orchestrator, cache, status_store).build()

        assert isinstance(exc_info.value.cause, GitHubAPIError)
        assert cache.read() == [ACTIVITY]
        report = status_store.load()
        assert report.status.value == "error"
        assert "500" in report.error
        assert report.activities_count == 1


class TestRunCacheBuild:
    def test_missing_token_recorded_in_status(self, test_config):
        config = test_config.model_copy(update={"github_token": ""})

        with pytest.raises(CacheBuildError) as exc_info:
            factory.run_cache_build(config)

        assert isinstance(exc_info.value.cause, CredentialError)
        raw = factory.build_status_store(config).load_raw()
        assert raw["status"] == "error"
        assert "GITHUB_TOKEN" in raw["error"]

    def test_builds_with_configured_client(self, test_config):
        with patch.object(factory.ActivityOrchestrator, "build", return_value=[ACTIVITY]) as build:
            result = factory.run_cache_build(test_config, "2024-01-01T00:00:00Z")

        assert result == [ACTIVITY]
        build.assert_called_once_with("2024-01-01T00:00:00Z", progress=None)
        assert factory.build_cache(test_config).read() == [ACTIVITY]
        assert factory.build_status_store(test_config).load().activities_count == 1

    @respx.mock
    def test_malformed_response_recorded_in_status(self, test_config):
        """JSON이 아닌 200 응답도 빌드 실패로 status.json에 남는다."""
        respx.get("https://api.github.com/repos/All-Hands-AI/OpenHands/issues").mock(
            return_value=httpx.Response(200, text="<html>oops</html>")
        )

        with pytest.raises(CacheBuildError):
            factory.run_cache_build(test_config)

        raw = factory.build_status_store(test_config).load_raw()
        assert raw["status"] == "error"
        assert raw["error"]
        assert factory.build_cache(test_config).read() is None

    def test_invalid_vocabulary_recorded_in_status(self, test_config):
        test_config.vocabulary_path.write_text("[start\nphrases = ", encoding="utf-8")

        with pytest.raises(CacheBuildError):
            factory.run_cache_build(test_config)

        assert factory.build_status_store(test_config).load_raw()["status"] == "error"
