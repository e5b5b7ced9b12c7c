import pytest
from pathlib import Path

from botrecap.config import AppConfig
from botrecap.models import Author, Comment, Item

BOT = Author(login="openhands-agent", kind="User")
HUMAN = Author(login="octocat", kind="User")
API_REPO = "https://api.github.com/repos/All-Hands-AI/OpenHands"


@pytest.fixture(autouse=True)
def _use_test_env(monkeypatch):
    """모든 테스트에서 .env 대신 .env.test를 사용하도록 강제."""
    monkeypatch.setattr(
        AppConfig, "model_config", {**AppConfig.model_config, "env_file": ".env.test"}
    )


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """테스트용 격리된 data 디렉토리."""
    data_dir = tmp_path / "data"
    (data_dir / "cache").mkdir(parents=True)
    return data_dir


@pytest.fixture
def test_config(tmp_data_dir: Path, tmp_path: Path) -> AppConfig:
    """테스트용 AppConfig. 실제 .env 파일 불필요."""
    return AppConfig(
        github_token="test-token",
        repo_owner="All-Hands-AI",
        repo_name="OpenHands",
        data_dir=tmp_data_dir,
        vocabulary_path=tmp_path / "vocabulary.toml",
        cron_secret="s3cret",
        max_retries=3,
        retry_delay=0.0,
    )


def make_comment(
    comment_id: int,
    body: str,
    created_at: str = "2024-01-01T00:00:00Z",
    author: Author = BOT,
) -> Comment:
    return Comment(
        id=comment_id,
        body=body,
        created_at=created_at,
        html_url=f"https://github.com/All-Hands-AI/OpenHands/issues/1#issuecomment-{comment_id}",
        author=author,
    )


def make_item(number: int = 1, *, is_pr: bool = False, title: str = "Fix the bug") -> Item:
    kind = "pull" if is_pr else "issues"
    return Item(
        number=number,
        title=title,
        body="Something is broken",
        comments_url=f"{API_REPO}/issues/{number}/comments",
        comment_count=2,
        is_pull_request=is_pr,
        html_url=f"https://github.com/All-Hands-AI/OpenHands/{kind}/{number}",
    )
