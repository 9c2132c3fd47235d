import logging
import time
from typing import Callable

from articlecrawl.domain.http_response import HttpResponse
from articlecrawl.exceptions import FetchError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class RetryingFetcher:
    """Wraps a fetcher with bounded retry and exponential backoff.

    Retries on `FetchError` and on throttling/server-error statuses. After the
    last attempt the final error is raised, or the final response returned,
    exactly as the wrapped fetcher produced it.
    """

    def __init__(self, fetcher, retries: int = 0, backoff_seconds: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self._fetcher = fetcher
        self.retries = int(retries)
        self.backoff_seconds = float(backoff_seconds)
        self._sleep = sleep

    def _delay(self, attempt: int) -> float:
        return self.backoff_seconds * (2 ** attempt)

    def fetch(self, url: str) -> HttpResponse:
        for attempt in range(self.retries + 1):
            last_attempt = attempt >= self.retries
            try:
                response = self._fetcher.fetch(url)
            except FetchError as e:
                if last_attempt:
                    raise
                delay = self._delay(attempt)
                logger.info("Fetch failed for %s (attempt %s/%s): %s; retrying in %.1fs", url, attempt + 1, self.retries + 1, e.original, delay)
                self._sleep(delay)
                continue

            if response.status_code in RETRYABLE_STATUS_CODES and not last_attempt:
                delay = self._delay(attempt)
                logger.info("Status %s for %s (attempt %s/%s); retrying in %.1fs", response.status_code, url, attempt + 1, self.retries + 1, delay)
                self._sleep(delay)
                continue
            return response
