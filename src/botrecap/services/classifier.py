"""봇 코멘트 분류기 — 코멘트 하나를 start/success/failure 범주로 판정.

판정 어휘는 코드가 아니라 데이터(Vocabulary)로 관리한다. 범주별 규칙 목록 중
하나라도 본문(소문자 변환)에 매칭되면 해당 범주다.

규칙 형식:
    "phrase"                         — 부분 문자열 포함
    (("apologize", "sorry"), ("unable to", "cannot"))
                                     — 모든 그룹이 매칭 (그룹 내부는 any)
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from botrecap.models import Comment

logger = logging.getLogger(__name__)

Rule = str | tuple[tuple[str, ...], ...]


class Category(str, Enum):
    START = "start"
    ISSUE_SUCCESS = "issue_success"
    ISSUE_FAILURE = "issue_failure"
    PR_SUCCESS = "pr_success"
    PR_FAILURE = "pr_failure"


_APOLOGY = ("apologize", "sorry")

DEFAULT_RULES: dict[Category, tuple[Rule, ...]] = {
    Category.START: (
        "started fixing the",
        "openhands started fixing",
        "i will help you",
        "i'll help you",
        "i can help you",
        "help you modify",
        "help you update",
        "help you with the changes",
    ),
    Category.ISSUE_SUCCESS: (
        "a potential fix has been generated and a draft pr",
        "openhands made the following changes to resolve the issues",
        "created a pull request",
        "opened a pull request",
        "submitted a pull request",
        "successfully fixed",
        "completed the changes",
        "implemented the changes",
    ),
    Category.ISSUE_FAILURE: (
        "the workflow to fix this issue encountered an error",
        "openhands failed to create any code changes",
        "an attempt was made to automatically fix this issue, but it was unsuccessful",
        (_APOLOGY, ("unable to", "cannot", "can't")),
        "unsuccessful",
        "manual intervention may be required",
    ),
    Category.PR_SUCCESS: (
        "openhands made the following changes to resolve the issues",
        "updated pull request",
        "updated the pull request",
        "made the requested changes",
        "applied the changes",
        "pushed the changes",
        "committed the changes",
        "implemented the requested changes",
    ),
    Category.PR_FAILURE: (
        "the workflow to fix this issue encountered an error",
        "openhands failed to create any code changes",
        "an attempt was made to automatically fix this issue, but it was unsuccessful",
        (_APOLOGY, ("unable to modify", "cannot modify", "can't modify")),
        "unsuccessful",
        "manual intervention may be required",
    ),
}


@dataclass(frozen=True)
class Vocabulary:
    """봇 식별자 + 범주별 판정 규칙."""

    rules: dict[Category, tuple[Rule, ...]] = field(default_factory=lambda: dict(DEFAULT_RULES))
    # 항상 봇으로 간주하는 login
    bot_logins: frozenset[str] = frozenset({"openhands-agent"})
    # user.type == "Bot"일 때만 봇으로 간주하는 login
    bot_app_logins: frozenset[str] = frozenset({"github-actions[bot]"})

    @classmethod
    def from_toml(cls, path: Path) -> Vocabulary:
        """[vocabulary] 테이블로 기본 어휘를 범주 단위로 덮어쓴다. 파일이 없으면 기본값."""
        if not path.exists():
            return cls()
        with open(path, "rb") as f:
            data = tomllib.load(f)
        section = data.get("vocabulary", {})

        rules = dict(DEFAULT_RULES)
        for category in Category:
            if category.value in section:
                rules[category] = tuple(_parse_rule(r) for r in section[category.value])
        kwargs: dict = {"rules": rules}
        if "bot_logins" in section:
            kwargs["bot_logins"] = frozenset(section["bot_logins"])
        if "bot_app_logins" in section:
            kwargs["bot_app_logins"] = frozenset(section["bot_app_logins"])
        logger.info("Loaded classifier vocabulary from %s", path)
        return cls(**kwargs)

    def matches(self, category: Category, body: str) -> bool:
        text = body.lower()
        return any(_rule_matches(rule, text) for rule in self.rules.get(category, ()))


def _parse_rule(raw) -> Rule:
    """TOML 값 → Rule. 문자열 그룹은 원소 하나짜리 그룹으로 본다."""
    if isinstance(raw, str):
        return raw.lower()
    return tuple(
        (group.lower(),) if isinstance(group, str) else tuple(p.lower() for p in group)
        for group in raw
    )


def _rule_matches(rule: Rule, text: str) -> bool:
    if isinstance(rule, str):
        return rule in text
    return all(any(p in text for p in group) for group in rule)


DEFAULT_VOCABULARY = Vocabulary()


# ── 판정 함수 ──


def is_bot_comment(comment: Comment, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    login = comment.author.login
    if login in vocabulary.bot_logins:
        return True
    return login in vocabulary.bot_app_logins and comment.author.kind == "Bot"


def _bot_matches(comment: Comment, category: Category, vocabulary: Vocabulary) -> bool:
    if not is_bot_comment(comment, vocabulary):
        return False
    return vocabulary.matches(category, comment.body)


def is_start_work_comment(comment: Comment, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    return _bot_matches(comment, Category.START, vocabulary)


def is_success_comment(comment: Comment, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    return _bot_matches(comment, Category.ISSUE_SUCCESS, vocabulary)


def is_failure_comment(comment: Comment, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    return _bot_matches(comment, Category.ISSUE_FAILURE, vocabulary)


def is_pr_modification_comment(
    comment: Comment, vocabulary: Vocabulary = DEFAULT_VOCABULARY
) -> bool:
    """PR 스레드의 작업 시작. Issue 스레드와 같은 START 어휘를 쓴다."""
    return _bot_matches(comment, Category.START, vocabulary)


def is_pr_modification_success_comment(
    comment: Comment, vocabulary: Vocabulary = DEFAULT_VOCABULARY
) -> bool:
    return _bot_matches(comment, Category.PR_SUCCESS, vocabulary)


def is_pr_modification_failure_comment(
    comment: Comment, vocabulary: Vocabulary = DEFAULT_VOCABULARY
) -> bool:
    return _bot_matches(comment, Category.PR_FAILURE, vocabulary)
