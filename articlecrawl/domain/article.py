from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from articlecrawl.exceptions import ParseFailure
from articlecrawl.utils.datetime_utils import parse_iso_date

ARTICLE_FIELDS = ("title", "published_at", "body")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = "\n".join(str(v) for v in value)
    text = str(value)
    return text or None


@dataclass(frozen=True)
class ArticleRecord:
    url: str
    published_at: Optional[date]
    title: Optional[str]
    body: str

    @classmethod
    def from_fields(cls, url: str, fields: Mapping[str, Any]) -> "ArticleRecord":
        """Build a record from an extraction mapping.

        Raises ParseFailure when `body` is missing; every other field is optional.
        """
        body = _as_text(fields.get("body"))
        if body is None:
            raise ParseFailure(url, "body")
        published_at = fields.get("published_at")
        if not isinstance(published_at, date):
            published_at = parse_iso_date(published_at) if isinstance(published_at, str) else None
        return cls(url=url, published_at=published_at, title=_as_text(fields.get("title")), body=body)
