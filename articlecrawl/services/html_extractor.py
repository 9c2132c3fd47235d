import logging
from typing import Any, Callable, Iterable, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from articlecrawl.domain.extraction_rule import ExtractionRule
from articlecrawl.utils.datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

URL_ATTRIBUTES = frozenset({"href", "src"})


class HtmlExtractor:
    """Pulls named fields out of markup using declarative CSS selector rules.

    Parsing happens once per `extract()` call. A rule that matches nothing
    simply leaves its field out of the result.
    """

    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
    ):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract(self, content: str, rules: Iterable[ExtractionRule], base_url: Optional[str] = None) -> dict[str, Any]:
        soup = self._soup_factory(content or "")
        fields: dict[str, Any] = {}
        for rule in rules:
            value = self._apply(soup, rule, base_url)
            if value is not None:
                fields[rule.field_name] = value
        return fields

    def _apply(self, soup: BeautifulSoup, rule: ExtractionRule, base_url: Optional[str]) -> Any:
        if rule.is_many:
            values = [v for v in (self._node_value(n, rule, base_url) for n in soup.select(rule.selector)) if v]
            if rule.parse_date:
                values = [d for d in (parse_iso_date(v) for v in values) if d is not None]
            if not values:
                return None
            if rule.join:
                return "\n".join(str(v) for v in values)
            return values

        node = soup.select_one(rule.selector)
        if node is None:
            return None
        value = self._node_value(node, rule, base_url)
        if not value:
            return None
        if rule.parse_date:
            return parse_iso_date(value)
        return value

    def _node_value(self, node: Tag, rule: ExtractionRule, base_url: Optional[str]) -> Optional[str]:
        if rule.attribute is None:
            return node.get_text().strip()
        raw = node.get(rule.attribute)
        if raw is None:
            return None
        # multi-valued attributes (class, rel) come back as lists
        if isinstance(raw, list):
            raw = " ".join(raw)
        value = raw.strip()
        if value and base_url and rule.attribute.lower() in URL_ATTRIBUTES:
            value = urljoin(base_url, value)
        return value
