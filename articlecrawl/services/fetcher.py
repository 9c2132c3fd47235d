from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from articlecrawl.domain.fetch_result import FetchResult
from articlecrawl.domain.http_response import HttpResponse
from articlecrawl.exceptions import FetchError
from articlecrawl.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Load a URL and return a normalized HTTP-like response.

    Implementations: `HttpServiceFetcher` (plain HTTP) and
    `PlaywrightRenderingSession` (script-rendered HTML). Both raise
    `FetchError` on transport/browser failures.
    """

    def fetch(self, url: str) -> HttpResponse: ...


class HttpServiceFetcher:
    def __init__(self, http_service):
        self._http_service = http_service

    def fetch(self, url: str) -> HttpResponse:
        return self._http_service.fetch(url)


class PageFetcher:
    """Turns a `Fetcher` backend into one that never raises.

    Network errors, timeouts and non-2xx statuses become FAILED `FetchResult`s
    so the crawl loop can record them and move on.
    """

    def __init__(self, fetcher: Fetcher, clock: Optional[Callable] = None):
        self._fetcher = fetcher
        self._clock = clock or utc_now

    def fetch(self, url: str) -> FetchResult:
        try:
            response = self._fetcher.fetch(url)
        except FetchError as e:
            logger.warning("Fetch failed for %s: %s", url, e.original)
            return FetchResult.failure(url, str(e.original), self._clock())
        except Exception as e:
            logger.error("Fetch error for %s: %s", url, e, exc_info=True)
            return FetchResult.failure(url, f"{type(e).__name__}: {e}", self._clock())

        fetched_at = self._clock()
        sc = response.status_code
        if sc < 200 or sc >= 300:
            logger.warning("Non-success status for %s: %s", url, sc)
            return FetchResult.failure(url, f"HTTP {sc}", fetched_at, status_code=sc)

        logger.info("Fetched %s -> status %s", url, sc)
        return FetchResult.success(url, response.text, fetched_at, status_code=sc)
