import logging
import time
from typing import Callable, Iterable, Optional, Sequence

from articlecrawl.domain.article import ArticleRecord
from articlecrawl.domain.config import CrawlerConfig
from articlecrawl.domain.crawl_state import CrawlState
from articlecrawl.domain.extraction_rule import ExtractionRule
from articlecrawl.exceptions import ParseFailure
from articlecrawl.services.fetcher import PageFetcher
from articlecrawl.services.fetcher_factory import FetcherFactory
from articlecrawl.services.html_extractor import HtmlExtractor
from articlecrawl.services.pagination import ListingPages

logger = logging.getLogger(__name__)

LINKS_FIELD = "links"


def link_rule_name(listing_rules: Sequence[ExtractionRule]) -> str:
    """Name of the listing field that carries article URLs.

    The rule named `links` wins; otherwise the first MANY rule is used.
    """
    names = [r.field_name for r in listing_rules]
    if LINKS_FIELD in names:
        return LINKS_FIELD
    for rule in listing_rules:
        if rule.is_many:
            return rule.field_name
    raise ValueError("listing rules need a 'links' rule or at least one MANY rule")


def _as_url_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


class CrawlExecutor:
    """Runs one paginated crawl: listing pages first, then every discovered article.

    Link discovery and article extraction are separate phases so a failure in
    either only costs the page it happened on. Failed fetches and articles
    missing required content are recorded on the `CrawlState`; nothing short of
    a rendering-session startup failure aborts the run.
    """

    def __init__(
        self,
        *,
        extractor: HtmlExtractor,
        fetcher_factory: Optional[FetcherFactory] = None,
        delay_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.extractor = extractor
        self.fetcher_factory = fetcher_factory
        self.delay_seconds = float(delay_seconds or 0.0)
        self._sleep = sleep

    def _is_stopped(self, stop_event) -> bool:
        return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()

    def run(self, config: CrawlerConfig, stop_event=None, state: Optional[CrawlState] = None) -> CrawlState:
        """Crawl using a `CrawlerConfig`, holding one fetch session for the whole run."""
        if config is None:
            raise ValueError("config is required for run")
        if self.fetcher_factory is None:
            raise ValueError("fetcher_factory is required for run")
        delay = config.data.delay_seconds
        with self.fetcher_factory.open(config.fetch_mode, config) as fetcher:
            return self.crawl(
                config.base_url,
                config.page_count,
                config.listing_rules,
                config.article_rules,
                page_fetcher=PageFetcher(fetcher),
                page_param=config.data.page_param,
                stop_on_empty_page=config.data.stop_on_empty_page,
                delay_seconds=delay,
                stop_event=stop_event,
                state=state,
            )

    def crawl(
        self,
        base_url: str,
        page_count: int,
        listing_rules: Sequence[ExtractionRule],
        article_rules: Sequence[ExtractionRule],
        *,
        page_fetcher: PageFetcher,
        page_param: str = "page",
        stop_on_empty_page: bool = False,
        delay_seconds: Optional[float] = None,
        stop_event=None,
        state: Optional[CrawlState] = None,
    ) -> CrawlState:
        """Crawl `page_count` listing pages of `base_url` and extract every linked article.

        Pass `state` to keep a handle on partial results if the caller is
        interrupted mid-run.
        """
        links_field = link_rule_name(listing_rules)
        state = state if state is not None else CrawlState()
        delay = self.delay_seconds if delay_seconds is None else float(delay_seconds)
        fetches = 0

        def fetch(url: str):
            nonlocal fetches
            if fetches and delay > 0:
                self._sleep(delay)
            fetches += 1
            return page_fetcher.fetch(url)

        for listing_url in ListingPages(base_url, page_count, page_param):
            if self._is_stopped(stop_event):
                logger.info("Crawl cancelled before listing page %s", listing_url)
                state.stopped = True
                return state
            new_links = self._discover_links(fetch(listing_url), listing_rules, links_field, state)
            if new_links == 0 and stop_on_empty_page and listing_url in state.visited_listing_pages:
                logger.info("No new links on %s; stopping pagination", listing_url)
                break

        logger.info("Discovered %s article links on %s listing pages", len(state.discovered_links), len(state.visited_listing_pages))

        for link in state.discovered_links:
            if self._is_stopped(stop_event):
                logger.info("Crawl cancelled before article %s", link)
                state.stopped = True
                return state
            self._collect_article(fetch(link), article_rules, state)

        logger.info(
            "Crawl finished: %s records, %s failures",
            len(state.collected_records),
            len(state.failures),
        )
        return state

    def _discover_links(self, result, listing_rules: Iterable[ExtractionRule], links_field: str, state: CrawlState) -> int:
        if not result.ok:
            state.record_failure(result.url, result.error or "fetch failed")
            return 0
        state.visited_listing_pages.add(result.url)
        fields = self.extractor.extract(result.rendered_content, listing_rules, base_url=result.url)
        links = _as_url_list(fields.get(links_field))
        added = state.discovered_links.update(links)
        logger.debug("Listing page %s: %s links, %s new", result.url, len(links), added)
        return added

    def _collect_article(self, result, article_rules: Iterable[ExtractionRule], state: CrawlState) -> None:
        if not result.ok:
            state.record_failure(result.url, result.error or "fetch failed")
            return
        fields = self.extractor.extract(result.rendered_content, article_rules, base_url=result.url)
        try:
            record = ArticleRecord.from_fields(result.url, fields)
        except ParseFailure as e:
            logger.warning("Skipping %s: %s", result.url, e)
            state.record_failure(result.url, str(e))
            return
        state.collected_records.append(record)
