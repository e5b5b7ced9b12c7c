"""서비스 간 데이터 교환을 위한 데이터 모델 및 직렬화 유틸리티."""

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path


# ── GitHub 입력 모델 ──


@dataclass(frozen=True)
class Author:
    """코멘트 작성자."""

    login: str
    kind: str = ""  # GitHub user.type: "User" | "Bot" | "Organization"


@dataclass(frozen=True)
class Comment:
    """Issue/PR 스레드의 코멘트 하나."""

    id: int
    body: str
    created_at: str  # ISO 8601
    html_url: str
    author: Author


@dataclass(frozen=True)
class Item:
    """issues 목록 API가 반환하는 issue 또는 PR.

    GitHub는 두 리소스를 한 엔드포인트로 반환하며 PR에만 pull_request 키가 있다.
    """

    number: int
    title: str
    body: str
    comments_url: str
    comment_count: int
    is_pull_request: bool
    html_url: str


# ── Activity 모델 ──


class ActivityKind(str, Enum):
    ISSUE = "issue"
    PR = "pr"


class Outcome(str, Enum):
    """PR 스레드 activity의 결과."""

    SUCCESS = "success"
    FAILURE = "failure"


class IssueStatus(str, Enum):
    """Issue 스레드 activity의 결과. 연결된 PR의 현재 상태로 결정된다."""

    NO_PR = "no_pr"
    PR_OPEN = "pr_open"
    PR_MERGED = "pr_merged"
    PR_CLOSED = "pr_closed"


@dataclass(frozen=True)
class IssueActivity:
    """Issue에서 start → result 코멘트 한 쌍."""

    id: str  # "issue-{number}-{start_comment_id}"
    timestamp: str  # result 코멘트의 created_at
    url: str  # result 코멘트 URL
    title: str
    description: str
    status: IssueStatus = IssueStatus.NO_PR
    pr_reference: int | None = None
    kind: ActivityKind = field(default=ActivityKind.ISSUE, init=False)


@dataclass(frozen=True)
class PRActivity:
    """PR에서 start → result 코멘트 한 쌍."""

    id: str  # "pr-{number}-{start_comment_id}"
    timestamp: str
    url: str
    title: str
    description: str
    status: Outcome
    kind: ActivityKind = field(default=ActivityKind.PR, init=False)


Activity = IssueActivity | PRActivity


# ── 캐시 / 상태 리포트 ──


@dataclass
class CacheEntry:
    activities: list[Activity]
    written_at: str  # ISO 8601


class BuildStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class StatusReport:
    """마지막 캐시 빌드 결과. 외부 모니터링용."""

    status: BuildStatus
    last_successful_update: str | None = None
    last_attempt: str | None = None
    activities_count: int | None = None
    error: str | None = None


# ── GitHub API dict → 모델 ──


def comment_from_api(d: dict) -> Comment:
    """GitHub issue comment JSON → Comment."""
    user = d.get("user") or {}
    return Comment(
        id=d["id"],
        body=d.get("body") or "",
        created_at=d["created_at"],
        html_url=d.get("html_url", ""),
        author=Author(login=user.get("login", ""), kind=user.get("type") or ""),
    )


def item_from_api(d: dict) -> Item:
    """GitHub issues 목록 항목 JSON → Item."""
    return Item(
        number=d["number"],
        title=d.get("title") or "",
        body=d.get("body") or "",
        comments_url=d["comments_url"],
        comment_count=d.get("comments", 0),
        is_pull_request=d.get("pull_request") is not None,
        html_url=d.get("html_url", ""),
    )


# ── 직렬화 유틸리티 ──
# 대시보드가 읽는 JSON 포맷은 camelCase 키를 사용한다.


def activity_to_dict(activity: Activity) -> dict:
    """Activity → 대시보드 JSON dict."""
    d = {
        "id": activity.id,
        "type": activity.kind.value,
        "status": activity.status.value,
        "timestamp": activity.timestamp,
        "url": activity.url,
        "title": activity.title,
        "description": activity.description,
    }
    if isinstance(activity, IssueActivity) and activity.pr_reference is not None:
        d["prReference"] = activity.pr_reference
    return d


def activity_from_dict(d: dict) -> Activity:
    """dict → Activity 복원. kind에 따라 IssueActivity/PRActivity."""
    kind = ActivityKind(d.get("type") or d["kind"])
    common = {
        "id": d["id"],
        "timestamp": d["timestamp"],
        "url": d["url"],
        "title": d.get("title", ""),
        "description": d.get("description", ""),
    }
    if kind is ActivityKind.PR:
        return PRActivity(status=Outcome(d["status"]), **common)
    return IssueActivity(
        status=IssueStatus(d["status"]),
        pr_reference=d.get("prReference", d.get("pr_reference")),
        **common,
    )


def status_report_to_dict(report: StatusReport) -> dict:
    """StatusReport → JSON dict. None 필드는 생략."""
    d = {
        "status": report.status.value,
        "lastSuccessfulUpdate": report.last_successful_update,
        "lastAttempt": report.last_attempt,
        "activitiesCount": report.activities_count,
        "error": report.error,
    }
    return {k: v for k, v in d.items() if v is not None}


def status_report_from_dict(d: dict) -> StatusReport:
    return StatusReport(
        status=BuildStatus(d["status"]),
        last_successful_update=d.get("lastSuccessfulUpdate"),
        last_attempt=d.get("lastAttempt"),
        activities_count=d.get("activitiesCount"),
        error=d.get("error"),
    )


def _serialize(obj):
    """dataclass/enum JSON 직렬화 헬퍼."""
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def save_json(data, path: Path) -> None:
    """dict/list 또는 dataclass를 JSON으로 저장."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(data) if hasattr(data, "__dataclass_fields__") else data
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, default=_serialize)


def load_json(path: Path) -> dict | list:
    """JSON 파일 로드."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
