from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from articlecrawl.domain.http_response import HttpResponse
from articlecrawl.exceptions import FetchError, RenderingSessionUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaywrightHeadlessOptions:
    timeout_ms: int = 10_000
    wait_until: str = "networkidle"  # domcontentloaded | load | networkidle
    wait_for_selector: Optional[str] = None


class PlaywrightRenderingSession:
    """Headless browser session backed by Playwright.

    One browser and one browser context are launched by `open()` and reused by
    every `fetch()`; each fetch gets its own page, closed afterwards. The session
    must be closed by its owner, typically by using it as a context manager.

    Playwright is imported lazily so HTTP-only installs still work.
    """

    def __init__(self, *, user_agent: str, options: Optional[PlaywrightHeadlessOptions] = None):
        self._user_agent = user_agent
        self._options = options or PlaywrightHeadlessOptions()
        self._playwright = None
        self._browser = None
        self._context = None
        self._error_type = Exception
        self._timeout_type = Exception

    @property
    def options(self) -> PlaywrightHeadlessOptions:
        return self._options

    @property
    def is_open(self) -> bool:
        return self._context is not None

    def open(self) -> "PlaywrightRenderingSession":
        if self.is_open:
            return self
        try:
            from playwright.sync_api import Error, TimeoutError, sync_playwright  # type: ignore
        except ImportError as e:
            raise RenderingSessionUnavailable(
                "Headless fetch requested but Playwright is not installed. "
                "Install 'playwright' and run 'python -m playwright install chromium'."
            ) from e

        self._error_type = Error
        self._timeout_type = TimeoutError
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=True)
            self._context = self._browser.new_context(user_agent=self._user_agent)
        except Error as e:
            self.close()
            raise RenderingSessionUnavailable(f"Could not start headless browser: {e}") from e
        logger.info("Rendering session started (wait_until=%s)", self._options.wait_until)
        return self

    def close(self) -> None:
        """Release the browser; safe to call more than once."""
        context, browser, playwright = self._context, self._browser, self._playwright
        self._context = self._browser = self._playwright = None
        for resource, name in ((context, "context"), (browser, "browser"), (playwright, "playwright")):
            if resource is None:
                continue
            try:
                if name == "playwright":
                    resource.stop()
                else:
                    resource.close()
            except Exception:
                logger.warning("Error closing rendering session %s", name, exc_info=True)

    def __enter__(self) -> "PlaywrightRenderingSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def fetch(self, url: str) -> HttpResponse:
        """Load `url`, wait for rendering to settle and return the final DOM HTML."""
        if not self.is_open:
            raise RuntimeError("Rendering session is not open")

        page = None
        try:
            page = self._context.new_page()
            resp = page.goto(url, wait_until=self._options.wait_until, timeout=self._options.timeout_ms)
            if self._options.wait_for_selector:
                try:
                    page.wait_for_selector(self._options.wait_for_selector, timeout=self._options.timeout_ms)
                except self._timeout_type:
                    logger.debug("Selector %r did not appear on %s", self._options.wait_for_selector, url)
            # goto returns None for same-document navigations; the DOM is still valid.
            status = resp.status if resp is not None else 200
            content_type = resp.headers.get("content-type") if resp is not None else None
            return HttpResponse(status_code=status, text=page.content(), content_type=content_type)
        except self._error_type as e:
            raise FetchError(url, e) from e
        finally:
            if page is not None:
                try:
                    page.close()
                except self._error_type:
                    logger.debug("Error closing page for %s", url, exc_info=True)
