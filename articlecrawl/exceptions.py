"""Custom exceptions for ArticleCrawl."""


class ConfigError(Exception):
    """Raised when a crawl job file or its settings are invalid."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid config '{source}': {reason}")


class FetchError(Exception):
    """Raised by fetch backends when a page load fails (network, timeout, browser error)."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Fetch failed for {url}: {original}")


class ParseFailure(Exception):
    """Raised when a page is missing content that a record requires."""

    def __init__(self, url: str, field_name: str):
        self.url = url
        self.field_name = field_name
        super().__init__(f"Required field '{field_name}' not found in {url}")


class PersistFailure(Exception):
    """Raised when records cannot be written to (or read from) a destination."""

    def __init__(self, destination: str, original: Exception):
        self.destination = destination
        self.original = original
        super().__init__(f"Could not persist to {destination}: {original}")


class RenderingSessionUnavailable(Exception):
    """Raised when the headless rendering session cannot be started."""
