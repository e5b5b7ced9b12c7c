from datetime import timedelta
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """애플리케이션 전체 설정. .env 파일 또는 환경변수에서 로드."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GitHub 연결
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("github_token", "vite_github_token"),
    )
    api_base: str = "https://api.github.com"
    repo_owner: str = "All-Hands-AI"
    repo_name: str = "OpenHands"

    # 로깅 (DEBUG, INFO, WARNING ...)
    log_level: str = "INFO"

    # 파일 경로
    data_dir: Path = Path("data")
    vocabulary_path: Path = Path("vocabulary.toml")

    # 수집 범위 / 병렬 실행
    since_days: int = 30
    batch_size: int = 10

    # 복원력 (Resilience)
    max_retries: int = 3
    retry_delay: float = 1.0

    # 캐시
    use_cache: bool = True
    cache_ttl_hours: float = 24
    dashboard_cache_ttl_seconds: float = 300

    # rebuild 트리거 인증
    cron_secret: str = ""

    # 스케줄러
    scheduler_enabled: bool = False
    rebuild_interval_hours: float = 6

    # ── 파생 값 ──

    @property
    def repo_full_name(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    @property
    def cache_dir(self) -> Path:
        return self.data_dir / "cache"

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / "bot-activities.json"

    @property
    def status_path(self) -> Path:
        return self.cache_dir / "status.json"

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(hours=self.cache_ttl_hours)
