from typing import Iterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


class ListingPages:
    """Lazy, finite, restartable sequence of listing-page URLs.

    Page `i` (1..count) is `base_url` with `page_param=i` set in its query
    string; any other query parameters are kept in place.
    """

    def __init__(self, base_url: str, count: int, page_param: str = "page"):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url
        self.count = max(int(count), 0)
        self.page_param = page_param

    def url_for(self, index: int) -> str:
        parts = urlsplit(self.base_url)
        query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != self.page_param]
        query.append((self.page_param, str(index)))
        return urlunsplit(parts._replace(query=urlencode(query)))

    def __iter__(self) -> Iterator[str]:
        for index in range(1, self.count + 1):
            yield self.url_for(index)

    def __len__(self) -> int:
        return self.count

    def __repr__(self):
        return f"<ListingPages base={self.base_url} count={self.count}>"


def pages(base_url: str, count: int, page_param: str = "page") -> ListingPages:
    return ListingPages(base_url, count, page_param)
