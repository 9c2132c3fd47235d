"""Domain objects for ArticleCrawl - explicit re-exports to satisfy linters."""
from .article import ArticleRecord as ArticleRecord
from .config import CrawlerConfig as CrawlerConfig
from .crawl_state import CrawlFailure as CrawlFailure
from .crawl_state import CrawlState as CrawlState
from .extraction_rule import ExtractionRule as ExtractionRule
from .extraction_rule import Multiplicity as Multiplicity
from .fetch_result import FetchResult as FetchResult
from .fetch_result import FetchStatus as FetchStatus
from .http_response import HttpResponse as HttpResponse
from .link_set import LinkSet as LinkSet

__all__ = [
    "ArticleRecord",
    "CrawlerConfig",
    "CrawlFailure",
    "CrawlState",
    "ExtractionRule",
    "Multiplicity",
    "FetchResult",
    "FetchStatus",
    "HttpResponse",
    "LinkSet",
]
