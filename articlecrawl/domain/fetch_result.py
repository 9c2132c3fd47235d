from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class FetchStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching a single URL.

    A failed fetch is a normal outcome while crawling, so it is carried as data
    (`status=FAILED` with an `error` reason) rather than raised.
    """

    url: str
    rendered_content: Optional[str]
    fetched_at: datetime
    status: FetchStatus
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @classmethod
    def success(cls, url: str, content: str, fetched_at: datetime, status_code: Optional[int] = None) -> "FetchResult":
        return cls(url=url, rendered_content=content, fetched_at=fetched_at, status=FetchStatus.OK, status_code=status_code)

    @classmethod
    def failure(cls, url: str, error: str, fetched_at: datetime, status_code: Optional[int] = None) -> "FetchResult":
        return cls(url=url, rendered_content=None, fetched_at=fetched_at, status=FetchStatus.FAILED, status_code=status_code, error=error)
