from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

import requests

from articlecrawl.services.fetcher import Fetcher, HttpServiceFetcher
from articlecrawl.services.headless_browser_fetcher import PlaywrightHeadlessOptions, PlaywrightRenderingSession
from articlecrawl.services.http_service import HttpService
from articlecrawl.services.retrying_fetcher import RetryingFetcher

FETCH_MODES = ("http", "headless_chromium")


@dataclass(frozen=True)
class FetcherFactory:
    """Opens a scoped fetch backend for a crawl run.

    `open()` is a context manager: for `headless_chromium` it starts one
    rendering session and closes it on every exit path.
    """

    http_fetcher: Fetcher
    headless_session_factory: Callable[..., PlaywrightRenderingSession]
    retries: int = 0
    backoff_seconds: float = 1.0

    def _with_retries(self, fetcher: Fetcher, retries: int) -> Fetcher:
        if retries <= 0:
            return fetcher
        return RetryingFetcher(fetcher, retries=retries, backoff_seconds=self.backoff_seconds)

    def _http_fetcher(self, config=None) -> Fetcher:
        http_options = getattr(config, "http_options", None) if config is not None else None
        if not http_options:
            return self.http_fetcher
        base_service = self.http_fetcher._http_service
        # timeout_ms is milliseconds; requests takes seconds
        timeout = base_service.timeout
        if http_options.get("timeout_ms") is not None:
            timeout = float(http_options["timeout_ms"]) / 1000
        configured_service = HttpService(
            user_agent=http_options.get("user_agent", base_service.user_agent),
            http_client=requests.get,
            timeout=timeout,
        )
        return HttpServiceFetcher(configured_service)

    def _headless_session(self, config=None) -> PlaywrightRenderingSession:
        options = getattr(config, "headless_options", None) if config is not None else None
        if not options:
            return self.headless_session_factory()
        return self.headless_session_factory(
            options=PlaywrightHeadlessOptions(
                timeout_ms=options.get("timeout_ms", 10000),
                wait_until=options.get("wait_until", "networkidle"),
                wait_for_selector=options.get("wait_for_selector"),
            )
        )

    @contextmanager
    def open(self, fetch_mode: str, config=None) -> Iterator[Fetcher]:
        if fetch_mode is None or (isinstance(fetch_mode, str) and fetch_mode.strip() == ""):
            raise ValueError("fetch_mode is required")
        mode = fetch_mode.strip().lower()

        retries = self.retries
        if config is not None and config.data.retries is not None:
            retries = config.data.retries

        if mode == "http":
            yield self._with_retries(self._http_fetcher(config), retries)
            return
        if mode == "headless_chromium":
            with self._headless_session(config) as session:
                yield self._with_retries(session, retries)
            return
        raise ValueError(f"Unknown fetch_mode: {fetch_mode!r}")
