"""GitHub REST API v3 HTTP client with pagination, retry and rate limit handling."""

import functools
import logging
import threading
import time
from collections.abc import Callable

import httpx

from botrecap.exceptions import CredentialError, GitHubAPIError

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_DELAY = 1.0
REQUEST_TIMEOUT = 30.0
DEFAULT_RATE_LIMIT_WAIT = 60.0
PLACEHOLDER_TOKENS = frozenset({"", "placeholder"})


class RateLimited(Exception):
    """Rate limit 신호. 에러가 아니라 with_retry가 대기 후 재시도하는 용도."""

    def __init__(self, wait: float, url: str) -> None:
        self.wait = wait
        self.url = url
        super().__init__(f"Rate limited on {url}, retry in {wait:.1f}s")


def parse_link_header(header: str | None) -> str | None:
    """Link 헤더에서 rel="next" URL 추출. 없으면 None.

    '<https://api.github.com/...&page=2>; rel="next", <...>; rel="last"'
    """
    if not header:
        return None
    for link in header.split(","):
        parts = link.split(";")
        if len(parts) < 2:
            continue
        if any('rel="next"' in attr for attr in parts[1:]):
            url = parts[0].strip()
            if url.startswith("<") and url.endswith(">"):
                url = url[1:-1]
            return url or None
    return None


def linear_backoff(base: float) -> Callable[[int], float]:
    """attempt 1 → base, attempt 2 → 2*base, ..."""

    def delay(attempt: int) -> float:
        return base * attempt

    return delay


def with_retry(
    max_attempts: int = MAX_RETRIES,
    delay: Callable[[int], float] = linear_backoff(RETRY_DELAY),
):
    """GitHubAPIError는 max_attempts까지 재시도, RateLimited는 대기 후 무조건 재시도.

    Rate limit 대기는 재시도 횟수를 소모하지 않는다.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    return fn(*args, **kwargs)
                except RateLimited as e:
                    logger.warning("Rate limited on %s. Waiting %.1fs before retry", e.url, e.wait)
                    time.sleep(e.wait)
                except GitHubAPIError as e:
                    attempt += 1
                    if attempt >= max_attempts:
                        logger.error(
                            "Giving up after %d attempts: %s %s",
                            attempt,
                            e.status_code,
                            e.status_text,
                        )
                        raise
                    wait = delay(attempt)
                    logger.warning(
                        "API error %s (attempt %d/%d), retrying in %.1fs",
                        e.status_code,
                        attempt,
                        max_attempts,
                        wait,
                    )
                    time.sleep(wait)

        return wrapper

    return decorator


class GitHubClient:
    """GitHub REST API v3 HTTP client with retry and rate limit handling."""

    def __init__(
        self,
        token: str,
        *,
        api_base: str = "https://api.github.com",
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
    ) -> None:
        if (token or "").strip() in PLACEHOLDER_TOKENS:
            raise CredentialError("GITHUB_TOKEN environment variable is not set or invalid")
        self._api_base = api_base.rstrip("/")
        self._client = httpx.Client(
            base_url=self._api_base,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=REQUEST_TIMEOUT,
        )
        self._get = with_retry(max_retries, linear_backoff(retry_delay))(self._get_once)
        self._rate_limit_remaining: int | None = None
        self._rate_limit_lock = threading.Lock()

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @property
    def rate_limit_remaining(self) -> int | None:
        return self._rate_limit_remaining

    # ── Public API ──

    def fetch_all_pages(self, url: str, params: dict | None = None) -> list:
        """Link 헤더의 next를 따라가며 모든 페이지를 서버 순서대로 합친다."""
        items: list = []
        next_url: str | None = url
        page_params = params
        page = 0

        while next_url:
            page += 1
            logger.debug("Fetching page %d from %s", page, next_url)
            response = self._get(next_url, page_params)
            data = response.json()
            if isinstance(data, list):
                items.extend(data)
            else:
                items.append(data)
            next_url = parse_link_header(response.headers.get("Link"))
            # next 링크에 쿼리가 이미 포함되어 있다
            page_params = None

        logger.debug("Paginate %s → %d items (%d pages)", url, len(items), page)
        return items

    def list_issues(self, owner: str, repo: str, since: str) -> list[dict]:
        """Issue + PR 목록 (state=all, 최근 업데이트 순)."""
        return self.fetch_all_pages(
            f"/repos/{owner}/{repo}/issues",
            params={
                "state": "all",
                "sort": "updated",
                "direction": "desc",
                "per_page": 100,
                "since": since,
            },
        )

    def list_comments(self, comments_url: str) -> list[dict]:
        """Issue/PR 코멘트 목록. comments_url은 issues 목록 항목의 절대 URL."""
        return self.fetch_all_pages(comments_url)

    def get_pull(self, owner: str, repo: str, number: int) -> dict:
        """PR 상세 정보 조회 (state, merged)."""
        return self._get(f"/repos/{owner}/{repo}/pulls/{number}").json()

    # ── Internal ──

    def _get_once(self, url: str, params: dict | None = None) -> httpx.Response:
        try:
            response = self._client.get(url, params=params)
        except httpx.TransportError as e:
            raise GitHubAPIError(0, type(e).__name__, str(e)) from e
        logger.debug("Response: GET %s → %d", url, response.status_code)

        if response.is_success:
            self._track_rate_limit(response)
            return response

        wait = self._rate_limit_wait(response)
        if wait is not None:
            raise RateLimited(wait, url)
        raise GitHubAPIError(response.status_code, response.reason_phrase, response.text)

    def _track_rate_limit(self, response: httpx.Response) -> None:
        remaining_str = response.headers.get("X-RateLimit-Remaining")
        if remaining_str is None:
            return
        try:
            remaining = int(remaining_str)
        except ValueError:
            return

        with self._rate_limit_lock:
            self._rate_limit_remaining = remaining
        if remaining < 100:
            logger.warning("Rate limit low: %d remaining", remaining)

    @staticmethod
    def _rate_limit_wait(response: httpx.Response) -> float | None:
        """Rate limit 응답이면 대기 시간(초), 아니면 None."""
        if response.headers.get("X-RateLimit-Remaining") == "0":
            reset_str = response.headers.get("X-RateLimit-Reset")
            if reset_str:
                try:
                    return max(0.0, int(reset_str) - time.time())
                except ValueError:
                    pass
            return GitHubClient._get_retry_after(response)
        if response.status_code == 429:
            return GitHubClient._get_retry_after(response)
        return None

    @staticmethod
    def _get_retry_after(response: httpx.Response) -> float:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return max(0.0, float(retry_after))
            except ValueError:
                pass
        return DEFAULT_RATE_LIMIT_WAIT
