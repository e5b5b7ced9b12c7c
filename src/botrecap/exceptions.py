"""botrecap 예외 계층.

계층 구조:
    BotRecapError
    ├── CredentialError     (GitHub 토큰 누락/placeholder — 재시도 없음)
    ├── GitHubAPIError      (재시도 소진 후 GitHub API 실패)
    ├── CacheBuildError     (캐시 빌드 파이프라인 실패)
    └── CacheHealthError    (모니터: 캐시가 오래되었거나 비어 있음)
"""


class BotRecapError(Exception):
    """botrecap의 모든 예외의 기반 클래스."""


class CredentialError(BotRecapError):
    """GitHub 토큰이 없거나 placeholder 값. 네트워크 호출 전에 발생한다."""


class GitHubAPIError(BotRecapError):
    """GitHub API 호출이 재시도 후에도 실패."""

    def __init__(self, status_code: int, status_text: str, body: str = "") -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        message = f"GitHub API error: {status_code} {status_text}"
        if body:
            message = f"{message}\n{body}"
        super().__init__(message)


class CacheBuildError(BotRecapError):
    """Activity 수집 또는 캐시 쓰기 실패. 원인 예외를 보존한다."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Cache build failed: {cause}")


class CacheHealthError(BotRecapError):
    """캐시 헬스 체크 실패 (stale 또는 activity 0건)."""
