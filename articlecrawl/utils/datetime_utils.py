import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)


def parse_iso_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse an ISO-8601-like date or timestamp string and return its calendar date.

    Accepts `YYYY-MM-DD`, full timestamps with or without an offset, and a
    trailing `Z`. The date is taken as written (no timezone conversion).
    Returns None if parsing fails or value is None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug("Could not parse date string: %s", value)
        return None


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)
