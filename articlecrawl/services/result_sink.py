import csv
import logging
import os
from datetime import date
from enum import Enum
from typing import Iterable, List

from articlecrawl.domain.article import ArticleRecord
from articlecrawl.exceptions import PersistFailure

logger = logging.getLogger(__name__)

COLUMNS = ("url", "published_at", "title", "body")


class WriteMode(str, Enum):
    OVERWRITE = "overwrite"
    APPEND = "append"


def _to_row(record: ArticleRecord) -> dict:
    return {
        "url": record.url,
        "published_at": record.published_at.isoformat() if record.published_at else "",
        "title": record.title or "",
        "body": record.body,
    }


def _from_row(row: dict) -> ArticleRecord:
    published = row.get("published_at") or ""
    return ArticleRecord(
        url=row["url"],
        published_at=date.fromisoformat(published) if published else None,
        title=row.get("title") or None,
        body=row.get("body") or "",
    )


class CsvResultSink:
    """Writes ArticleRecords to a CSV file with a fixed column order.

    Fields containing newlines are quoted, so each record is exactly one
    logical row. Files are written with `newline=""` so embedded line breaks
    survive a round trip byte for byte.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def _existing_header(self, destination: str):
        if not os.path.exists(destination) or os.path.getsize(destination) == 0:
            return None
        with open(destination, "r", newline="", encoding=self.encoding) as f:
            return next(csv.reader(f), None)

    def persist(self, records: Iterable[ArticleRecord], destination: str, *, mode: WriteMode) -> int:
        """Write `records` to `destination`; returns the number of rows written.

        `mode` must be given explicitly: OVERWRITE replaces the file, APPEND adds
        rows (writing the header only for a new or empty file).
        """
        mode = WriteMode(mode)
        rows = [_to_row(r) for r in records]
        try:
            write_header = True
            if mode is WriteMode.APPEND:
                header = self._existing_header(destination)
                if header is not None:
                    if tuple(header) != COLUMNS:
                        raise PersistFailure(destination, ValueError(f"unexpected header {header!r}"))
                    write_header = False
            file_mode = "a" if mode is WriteMode.APPEND else "w"
            with open(destination, file_mode, newline="", encoding=self.encoding) as f:
                writer = csv.DictWriter(f, fieldnames=COLUMNS)
                if write_header:
                    writer.writeheader()
                writer.writerows(rows)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise PersistFailure(destination, e) from e

        logger.info("Saved %s records to %s (%s)", len(rows), destination, mode.value)
        return len(rows)

    def load(self, source: str) -> List[ArticleRecord]:
        """Read records back using the same column contract."""
        try:
            with open(source, "r", newline="", encoding=self.encoding) as f:
                reader = csv.DictReader(f)
                if reader.fieldnames is None:
                    return []
                if tuple(reader.fieldnames) != COLUMNS:
                    raise PersistFailure(source, ValueError(f"unexpected header {reader.fieldnames!r}"))
                return [_from_row(row) for row in reader]
        except (OSError, ValueError, csv.Error) as e:
            raise PersistFailure(source, e) from e
