"""AppConfig → 서비스 객체 조립. 호출자가 GitHubClient 수명을 관리한다."""

from __future__ import annotations

from collections.abc import Callable

from botrecap.config import AppConfig
from botrecap.exceptions import CacheBuildError, CredentialError
from botrecap.infra.github_client import GitHubClient
from botrecap.models import Activity
from botrecap.services.activity_service import ActivityService
from botrecap.services.cache import ActivityCache
from botrecap.services.cache_builder import CacheBuilder
from botrecap.services.classifier import Vocabulary
from botrecap.services.orchestrator import ActivityOrchestrator
from botrecap.services.resolver import PRStateResolver
from botrecap.services.status import StatusStore


def create_client(config: AppConfig) -> GitHubClient:
    return GitHubClient(
        config.github_token,
        api_base=config.api_base,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
    )


def build_orchestrator(config: AppConfig, client: GitHubClient) -> ActivityOrchestrator:
    resolver = PRStateResolver(client, config.repo_owner, config.repo_name)
    return ActivityOrchestrator(
        client,
        resolver,
        owner=config.repo_owner,
        repo=config.repo_name,
        vocabulary=Vocabulary.from_toml(config.vocabulary_path),
        batch_size=config.batch_size,
        since_days=config.since_days,
    )


def build_cache(config: AppConfig) -> ActivityCache:
    return ActivityCache(config.cache_path, ttl=config.cache_ttl)


def build_status_store(config: AppConfig) -> StatusStore:
    return StatusStore(config.status_path)


def build_activity_service(config: AppConfig) -> ActivityService:
    """캐시 miss일 때만 GitHubClient를 만든다. 캐시가 유효하면 토큰 없이도 읽힌다."""

    def fetch_live(since: str | None) -> list[Activity]:
        with create_client(config) as client:
            return build_orchestrator(config, client).build(since)

    return ActivityService(fetch_live, build_cache(config), use_cache=config.use_cache)


def run_cache_build(
    config: AppConfig,
    since: str | None = None,
    progress: Callable[[str], None] | None = None,
) -> list[Activity]:
    """Client 생성부터 캐시/status 쓰기까지. 토큰 오류도 status.json에 기록한다."""
    status_store = build_status_store(config)
    try:
        client = create_client(config)
    except CredentialError as e:
        status_store.record_error(str(e))
        raise CacheBuildError(e) from e

    with client:
        # vocabulary.toml 파싱 실패도 빌드 실패로 기록
        try:
            orchestrator = build_orchestrator(config, client)
        except Exception as e:
            status_store.record_error(str(e))
            raise CacheBuildError(e) from e
        builder = CacheBuilder(orchestrator, build_cache(config), status_store)
        return builder.build(since, progress=progress)
