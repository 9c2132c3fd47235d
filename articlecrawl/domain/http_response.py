from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Response from a single page load (HTTP or rendered)."""
    status_code: int
    text: str
    content_type: Optional[str] = None
