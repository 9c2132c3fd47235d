from collections import OrderedDict
from typing import Iterable, Iterator


class LinkSet:
    """
    Ordered, de-duplicated set of discovered URLs.

    Insertion order is preserved so that repeated runs over the same listing
    pages visit articles in the same order.
    """

    def __init__(self, urls: Iterable[str] = ()):
        self._links: "OrderedDict[str, None]" = OrderedDict()
        self.update(urls)

    def add(self, url: str) -> bool:
        """Add a URL. Returns True when it was not already present."""
        if url in self._links:
            return False
        self._links[url] = None
        return True

    def update(self, urls: Iterable[str]) -> int:
        """Add many URLs; returns how many were new."""
        return sum(1 for url in urls if self.add(url))

    def __contains__(self, url: object) -> bool:
        return url in self._links

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._links))

    def __len__(self) -> int:
        return len(self._links)

    def __repr__(self):
        return f"<LinkSet size={len(self)}>"
