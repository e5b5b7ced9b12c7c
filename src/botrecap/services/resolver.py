"""PR 상태 해석기 — success 코멘트가 가리키는 PR의 현재 상태를 IssueStatus로 변환."""

from __future__ import annotations

import dataclasses
import logging
import re

from botrecap.exceptions import GitHubAPIError
from botrecap.infra.github_client import GitHubClient
from botrecap.models import IssueActivity, IssueStatus

logger = logging.getLogger(__name__)

# 우선순위 순서. 먼저 매칭되는 패턴이 이긴다.
PR_REFERENCE_PATTERNS = (
    re.compile(r"https?://github\.com/[\w.-]+/[\w.-]+/pull/(\d+)"),
    re.compile(r"pull/(\d+)"),
    re.compile(r"\bPR #(\d+)", re.IGNORECASE),
)


def extract_pr_reference(body: str) -> int | None:
    """코멘트 본문에서 PR 번호 추출. 없으면 None."""
    for pattern in PR_REFERENCE_PATTERNS:
        match = pattern.search(body)
        if match:
            return int(match.group(1))
    return None


def pr_status_from_api(pr: dict) -> IssueStatus:
    """{merged, state} → IssueStatus."""
    if pr.get("merged"):
        return IssueStatus.PR_MERGED
    if pr.get("state") == "closed":
        return IssueStatus.PR_CLOSED
    return IssueStatus.PR_OPEN


class PRStateResolver:
    def __init__(self, client: GitHubClient, owner: str, repo: str) -> None:
        self._client = client
        self._owner = owner
        self._repo = repo

    def resolve(self, number: int) -> IssueStatus:
        """PR 조회 실패는 에러가 아니라 no_pr로 격하."""
        try:
            pr = self._client.get_pull(self._owner, self._repo, number)
        except GitHubAPIError as e:
            logger.warning("Could not resolve PR #%d, treating as no_pr: %s", number, e)
            return IssueStatus.NO_PR
        return pr_status_from_api(pr)

    def resolve_activity(self, activity: IssueActivity) -> IssueActivity:
        if activity.pr_reference is None:
            return dataclasses.replace(activity, status=IssueStatus.NO_PR)
        status = self.resolve(activity.pr_reference)
        logger.debug("%s → PR #%d %s", activity.id, activity.pr_reference, status.value)
        return dataclasses.replace(activity, status=status)
