"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from articlecrawl.services.crawl_executor import CrawlExecutor
from articlecrawl.services.crawler_config_parser import CrawlerConfigParser
from articlecrawl.services.fetcher import HttpServiceFetcher
from articlecrawl.services.fetcher_factory import FetcherFactory
from articlecrawl.services.headless_browser_fetcher import PlaywrightHeadlessOptions, PlaywrightRenderingSession
from articlecrawl.services.html_extractor import HtmlExtractor
from articlecrawl.services.http_service import HttpService
from articlecrawl.services.result_sink import CsvResultSink
from articlecrawl import config as env


# Environment variables used by the container (read once by `articlecrawl.config`).
#
# USER_AGENT (str, default: "ArticleCrawl/0.1")
#   User-Agent header for outbound HTTP requests and the headless browser context.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for outbound HTTP requests. Also reused for headless page loads.
#
# CRAWL_DELAY (float seconds, default: 1.0)
#   Politeness delay between page fetches; a job file's delay_seconds wins.
#
# FETCH_RETRIES (int, default: 0)
#   Extra attempts per URL on transport errors and 429/5xx; a job file's retries wins.
#
# RETRY_BACKOFF_SECONDS (float seconds, default: 1.0)
#   Base delay for exponential backoff between retries.
ENV = {
    "USER_AGENT": env.USER_AGENT,
    "HTTP_TIMEOUT": env.HTTP_TIMEOUT,
    "CRAWL_DELAY": env.CRAWL_DELAY,
    "FETCH_RETRIES": env.FETCH_RETRIES,
    "RETRY_BACKOFF_SECONDS": env.RETRY_BACKOFF_SECONDS,
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for ArticleCrawl."""

    config = providers.Configuration(default=ENV)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    page_fetcher = providers.Singleton(
        HttpServiceFetcher,
        http_service=http_service,
    )

    # Factory, not Singleton: each crawl run opens and closes its own session.
    rendering_session = providers.Factory(
        PlaywrightRenderingSession,
        user_agent=config.USER_AGENT.as_(str),
        options=providers.Factory(
            PlaywrightHeadlessOptions,
            timeout_ms=providers.Callable(lambda t: t * 1000, config.HTTP_TIMEOUT.as_(int)),
        ),
    )

    fetcher_factory = providers.Singleton(
        FetcherFactory,
        http_fetcher=page_fetcher,
        headless_session_factory=rendering_session.provider,
        retries=config.FETCH_RETRIES.as_(int),
        backoff_seconds=config.RETRY_BACKOFF_SECONDS.as_(float),
    )

    html_extractor = providers.Singleton(HtmlExtractor)

    config_parser = providers.Singleton(CrawlerConfigParser)

    result_sink = providers.Singleton(CsvResultSink)

    crawl_executor = providers.Factory(
        CrawlExecutor,
        extractor=html_extractor,
        fetcher_factory=fetcher_factory,
        delay_seconds=config.CRAWL_DELAY.as_(float),
    )
