from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from articlecrawl.domain.extraction_rule import ExtractionRule


@dataclass(frozen=True)
class CrawlerConfigMetadata:
    """Where a crawl job came from."""

    name: str
    config_path: Optional[str] = None


@dataclass(frozen=True)
class CrawlerConfigData:
    """Crawl-behavior fields for a crawl job."""

    base_url: str
    page_count: int
    listing_rules: tuple[ExtractionRule, ...]
    article_rules: tuple[ExtractionRule, ...]
    fetch_mode: str
    page_param: str = "page"
    stop_on_empty_page: bool = False
    delay_seconds: Optional[float] = None
    retries: Optional[int] = None
    headless_options: Optional[dict[str, Any]] = None
    http_options: Optional[dict[str, Any]] = None
    output_path: Optional[str] = None
    output_mode: str = "overwrite"


class CrawlerConfig:
    """Crawl job composed of metadata + crawl settings."""

    def __init__(
        self,
        name: str,
        base_url: str,
        page_count: int,
        listing_rules,
        article_rules,
        fetch_mode: str = None,
        config_path: Optional[str] = None,
        page_param: str = "page",
        stop_on_empty_page: bool = False,
        delay_seconds: Optional[float] = None,
        retries: Optional[int] = None,
        headless_options: Optional[dict[str, Any]] = None,
        http_options: Optional[dict[str, Any]] = None,
        output_path: Optional[str] = None,
        output_mode: str = "overwrite",
    ):
        if fetch_mode is None or (isinstance(fetch_mode, str) and fetch_mode.strip() == ""):
            raise ValueError("fetch_mode is required")
        if not base_url:
            raise ValueError("base_url is required")

        self.meta = CrawlerConfigMetadata(name=name, config_path=config_path)
        self.data = CrawlerConfigData(
            base_url=base_url,
            page_count=int(page_count),
            listing_rules=tuple(listing_rules or ()),
            article_rules=tuple(article_rules or ()),
            fetch_mode=fetch_mode.strip().lower(),
            page_param=page_param,
            stop_on_empty_page=bool(stop_on_empty_page),
            delay_seconds=delay_seconds,
            retries=retries,
            headless_options=headless_options,
            http_options=http_options,
            output_path=output_path,
            output_mode=output_mode,
        )

    @property
    def name(self) -> str:
        return self.meta.name

    @property
    def config_path(self) -> Optional[str]:
        return self.meta.config_path

    @property
    def base_url(self) -> str:
        return self.data.base_url

    @property
    def page_count(self) -> int:
        return self.data.page_count

    @property
    def listing_rules(self) -> tuple[ExtractionRule, ...]:
        return self.data.listing_rules

    @property
    def article_rules(self) -> tuple[ExtractionRule, ...]:
        return self.data.article_rules

    @property
    def fetch_mode(self) -> str:
        return self.data.fetch_mode

    @property
    def headless_options(self) -> Optional[dict[str, Any]]:
        return self.data.headless_options

    @property
    def http_options(self) -> Optional[dict[str, Any]]:
        return self.data.http_options

    def __repr__(self):
        return f"<CrawlerConfig name={self.name} base_url={self.base_url} pages={self.page_count} mode={self.fetch_mode}>"
