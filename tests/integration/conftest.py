"""Integration test fixtures — real .env credentials + isolated tmp data directory."""

from pathlib import Path

import pytest

from botrecap.config import AppConfig
from botrecap.infra.github_client import GitHubClient

# ── .env 존재 여부 확인 ──

_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
HAS_ENV = _env_path.exists()


@pytest.fixture(autouse=True)
def _use_real_env(monkeypatch):
    """Root conftest의 _use_test_env를 재override하여 real .env 사용."""
    monkeypatch.setattr(AppConfig, "model_config", {**AppConfig.model_config, "env_file": ".env"})


@pytest.fixture(scope="class")
def real_config(tmp_path_factory):
    """Real .env 자격증명 + tmp data_dir. 실제 data/ 오염 없음."""
    # class scope에서는 monkeypatch 사용 불가
    original = AppConfig.model_config.copy()
    AppConfig.model_config = {**original, "env_file": ".env"}

    try:
        data_dir = tmp_path_factory.mktemp("integration") / "data"
        # 짧은 기간 + 작은 배치로 API 사용량을 줄인다
        config = AppConfig(data_dir=data_dir, since_days=2, batch_size=5)
        if not config.github_token:
            pytest.skip("GITHUB_TOKEN missing in .env")
        yield config
    finally:
        AppConfig.model_config = original


@pytest.fixture(scope="class")
def github_client(real_config):
    """Real GitHub HTTP client."""
    client = GitHubClient(real_config.github_token, api_base=real_config.api_base)
    yield client
    client.close()
