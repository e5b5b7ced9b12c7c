"""코멘트 스레드 → Activity 목록.

start 코멘트마다 그 뒤(strictly after) 코멘트 중 첫 success와 첫 failure를 찾는다.
success가 있으면 위치와 무관하게 success가 이기고, 둘 다 없으면 아직 진행 중이므로
아무것도 만들지 않는다. 한 스레드의 여러 start → result 사이클은 각각 Activity가 된다.
"""

from __future__ import annotations

from collections.abc import Callable

from botrecap.models import (
    Activity,
    ActivityKind,
    Comment,
    IssueActivity,
    IssueStatus,
    Item,
    Outcome,
    PRActivity,
)
from botrecap.services import classifier
from botrecap.services.classifier import DEFAULT_VOCABULARY, Vocabulary
from botrecap.services.resolver import extract_pr_reference

DESCRIPTION_LIMIT = 500
ELLIPSIS = "..."

Predicate = Callable[[Comment, Vocabulary], bool]

_PREDICATES: dict[ActivityKind, tuple[Predicate, Predicate, Predicate]] = {
    ActivityKind.ISSUE: (
        classifier.is_start_work_comment,
        classifier.is_success_comment,
        classifier.is_failure_comment,
    ),
    ActivityKind.PR: (
        classifier.is_pr_modification_comment,
        classifier.is_pr_modification_success_comment,
        classifier.is_pr_modification_failure_comment,
    ),
}


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    """limit 글자 이내로 자른다. 잘린 경우 끝에 '...'."""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def activity_id(kind: ActivityKind, item_number: int, start_comment_id: int) -> str:
    return f"{kind.value}-{item_number}-{start_comment_id}"


def _first(comments: list[Comment], predicate: Predicate, vocabulary: Vocabulary) -> Comment | None:
    return next((c for c in comments if predicate(c, vocabulary)), None)


def extract_activities(
    item: Item,
    comments: list[Comment],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> list[Activity]:
    """시간순 코멘트 목록에서 start → result 쌍마다 Activity 하나."""
    kind = ActivityKind.PR if item.is_pull_request else ActivityKind.ISSUE
    is_start, is_success, is_failure = _PREDICATES[kind]
    title = item.title or f"{'PR' if item.is_pull_request else 'Issue'} #{item.number}"

    activities: list[Activity] = []
    for i, comment in enumerate(comments):
        if not is_start(comment, vocabulary):
            continue
        rest = comments[i + 1 :]
        success = _first(rest, is_success, vocabulary)
        result = success or _first(rest, is_failure, vocabulary)
        if result is None:
            continue

        common = {
            "id": activity_id(kind, item.number, comment.id),
            "timestamp": result.created_at,
            "url": result.html_url,
            "title": title,
            "description": truncate(result.body),
        }
        if kind is ActivityKind.PR:
            status = Outcome.SUCCESS if success else Outcome.FAILURE
            activities.append(PRActivity(status=status, **common))
        else:
            pr_reference = extract_pr_reference(result.body) if success else None
            activities.append(
                IssueActivity(status=IssueStatus.NO_PR, pr_reference=pr_reference, **common)
            )
    return activities
