import time
import logging
import requests
from typing import Any, Dict, Iterator, List, Optional
from review_dashboard.config import settings
from review_dashboard.core.exceptions import (
    GrantPlatformConfigurationException,
    GrantPlatformException,
    GrantPlatformRateLimitException,
)

logger = logging.getLogger(__name__)

LEADERBOARD_ORDERS = ("auto_score", "title")


class GoodGrantsClient:
    """GoodGrants REST client with request spacing and retry-on-429."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        request_delay: Optional[float] = None,
        rate_limit_backoff: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        self.api_key = api_key or settings.goodgrants_api_key
        if not self.api_key:
            raise GrantPlatformConfigurationException()

        self.base_url = (base_url or settings.GOODGRANTS_BASE_URL).rstrip("/")
        self.request_delay = (
            settings.GOODGRANTS_REQUEST_DELAY if request_delay is None else request_delay
        )
        self.rate_limit_backoff = (
            settings.GOODGRANTS_RATE_LIMIT_BACKOFF
            if rate_limit_backoff is None
            else rate_limit_backoff
        )
        self.max_retries = settings.GOODGRANTS_MAX_RETRIES if max_retries is None else max_retries
        self.timeout = settings.GOODGRANTS_TIMEOUT

        self.session = session or requests.Session()
        self.session.headers.update({
            "x-api-key": self.api_key,
            "Accept": settings.GOODGRANTS_ACCEPT,
            "x-api-language": settings.GOODGRANTS_LANGUAGE,
        })
        self.last_request_time = 0.0

    def close(self):
        self.session.close()

    def _rate_limit_wait(self):
        """Keep at least request_delay seconds between requests."""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.request_delay:
            time.sleep(self.request_delay - elapsed)
        self.last_request_time = time.time()

    def _request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET an endpoint, retrying after a fixed backoff while rate limited."""
        url = f"{self.base_url}{endpoint}"
        attempts = 0
        while True:
            self._rate_limit_wait()
            attempts += 1
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as e:
                logger.error(f"GoodGrants request failed: {endpoint} - {e}")
                raise GrantPlatformException(f"Request to {endpoint} failed: {e}") from e

            if response.status_code == 429:
                if attempts > self.max_retries:
                    raise GrantPlatformRateLimitException(endpoint, attempts)
                logger.warning(
                    f"Rate limited on {endpoint}, retrying in {self.rate_limit_backoff}s "
                    f"(attempt {attempts}/{self.max_retries + 1})"
                )
                time.sleep(self.rate_limit_backoff)
                continue

            if not response.ok:
                logger.error(f"GoodGrants API error: {response.status_code} - {response.text[:500]}")
                raise GrantPlatformException(
                    f"API request failed: {response.status_code}",
                    status_code=response.status_code,
                )
            return response.json()

    def get_score_sets(self) -> List[Dict[str, Any]]:
        """All score sets: [{"slug": ..., "name": {"en_GB": ...}}, ...]."""
        return self._request("/score-set").get("data") or []

    def get_leaderboard_page(
        self,
        score_set_slug: str,
        page: int = 1,
        per_page: Optional[int] = None,
        order: str = "auto_score",
        direction: str = "desc",
    ) -> Dict[str, Any]:
        """
        One page of a score set's leaderboard.

        Only auto_score and title are orderable on the platform; anything
        else falls back to auto_score descending.
        """
        if order not in LEADERBOARD_ORDERS:
            order, direction = "auto_score", "desc"
        params = {
            "score_set": score_set_slug,
            "per_page": per_page or settings.GOODGRANTS_PER_PAGE,
            "page": page,
            "order": order,
            "dir": direction if direction in ("asc", "desc") else "desc",
        }
        return self._request("/leaderboard", params=params)

    def iter_leaderboard(self, score_set_slug: str) -> Iterator[Dict[str, Any]]:
        """Yield every leaderboard entry of a score set, page by page."""
        page = 1
        while True:
            logger.info(f"Fetching leaderboard page {page} for score set {score_set_slug}")
            payload = self.get_leaderboard_page(score_set_slug, page=page)
            entries = payload.get("data") or []
            if not entries:
                break
            yield from entries

            last_page = int(payload.get("last_page") or page)
            if page >= last_page:
                break
            page += 1
