from dataclasses import dataclass, field
from typing import List, NamedTuple, Set

from articlecrawl.domain.article import ArticleRecord
from articlecrawl.domain.link_set import LinkSet


class CrawlFailure(NamedTuple):
    url: str
    reason: str


@dataclass
class CrawlState:
    """Everything one crawl run produced, successes and failures alike.

    Any partially filled state is valid and may be persisted.
    """

    visited_listing_pages: Set[str] = field(default_factory=set)
    discovered_links: LinkSet = field(default_factory=LinkSet)
    collected_records: List[ArticleRecord] = field(default_factory=list)
    failures: List[CrawlFailure] = field(default_factory=list)
    stopped: bool = False

    def record_failure(self, url: str, reason: str) -> None:
        self.failures.append(CrawlFailure(url, reason))

    def __repr__(self):
        return (
            f"<CrawlState listing_pages={len(self.visited_listing_pages)} "
            f"links={len(self.discovered_links)} records={len(self.collected_records)} "
            f"failures={len(self.failures)} stopped={self.stopped}>"
        )
