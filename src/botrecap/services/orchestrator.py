"""Issue/PR 목록 → 코멘트 수집 → 분류 → PR 상태 해석 → 정렬된 Activity 피드."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from botrecap.infra.github_client import GitHubClient
from botrecap.models import (
    Activity,
    IssueActivity,
    Item,
    comment_from_api,
    item_from_api,
)
from botrecap.services.classifier import DEFAULT_VOCABULARY, Vocabulary
from botrecap.services.date_utils import default_since, parse_iso
from botrecap.services.extractor import extract_activities
from botrecap.services.resolver import PRStateResolver

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_SINCE_DAYS = 30


def sort_activities(activities: list[Activity]) -> list[Activity]:
    """timestamp 내림차순 (가장 최근 결과가 먼저)."""
    return sorted(activities, key=lambda a: parse_iso(a.timestamp), reverse=True)


class ActivityOrchestrator:
    def __init__(
        self,
        client: GitHubClient,
        resolver: PRStateResolver,
        *,
        owner: str,
        repo: str,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        batch_size: int = DEFAULT_BATCH_SIZE,
        since_days: int = DEFAULT_SINCE_DAYS,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._client = client
        self._resolver = resolver
        self._owner = owner
        self._repo = repo
        self._vocabulary = vocabulary
        self._batch_size = batch_size
        self._since_days = since_days

    def build(
        self,
        since: str | None = None,
        progress: Callable[[str], None] | None = None,
    ) -> list[Activity]:
        """전체 Activity 피드. 실패 시 부분 결과 없이 예외를 그대로 전파한다."""
        started = time.monotonic()
        since = since or default_since(self._since_days)
        logger.info("Build start: %s/%s since=%s", self._owner, self._repo, since)

        raw_items = self._client.list_issues(self._owner, self._repo, since)
        items = [item_from_api(d) for d in raw_items]
        with_comments = [item for item in items if item.comment_count > 0]
        issues = [item for item in with_comments if not item.is_pull_request]
        prs = [item for item in with_comments if item.is_pull_request]
        logger.info(
            "Fetched %d items (%d with comments: %d issues, %d PRs)",
            len(items),
            len(with_comments),
            len(issues),
            len(prs),
        )

        activities: list[Activity] = []
        for label, partition in (("issues", issues), ("PRs", prs)):
            activities.extend(self._process_in_batches(label, partition, progress))

        result = sort_activities(activities)
        logger.info(
            "Build completed: %d activities in %.2fs", len(result), time.monotonic() - started
        )
        return result

    def _process_in_batches(
        self,
        label: str,
        items: list[Item],
        progress: Callable[[str], None] | None,
    ) -> list[Activity]:
        """batch_size 단위 wave. wave가 모두 끝나야 다음 wave를 시작한다."""
        activities: list[Activity] = []
        if not items:
            return activities

        total = (len(items) + self._batch_size - 1) // self._batch_size
        with ThreadPoolExecutor(max_workers=self._batch_size) as executor:
            for start in range(0, len(items), self._batch_size):
                batch = items[start : start + self._batch_size]
                number = start // self._batch_size + 1
                logger.debug("Processing %s batch %d/%d", label, number, total)
                if progress:
                    progress(f"Processing {label} batch {number}/{total}...")
                futures = [executor.submit(self._process_item, item) for item in batch]
                # 제출 순서대로 result() → 배치 barrier + 첫 예외 전파
                for future in futures:
                    activities.extend(future.result())
        return activities

    def _process_item(self, item: Item) -> list[Activity]:
        comments = [comment_from_api(d) for d in self._client.list_comments(item.comments_url)]
        activities = extract_activities(item, comments, self._vocabulary)
        return [
            self._resolver.resolve_activity(a) if isinstance(a, IssueActivity) else a
            for a in activities
        ]
