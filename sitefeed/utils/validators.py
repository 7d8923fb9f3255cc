"""
SiteFeed Validators
===================

Parsing helpers for loosely formatted feed values.
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional


def parse_pub_date(value: str) -> Optional[datetime]:
    """Parse an RSS ``pubDate`` into an aware datetime.

    RFC 822 dates (``Thu, 05 Sep 2024 12:00:00 GMT``) are the norm; ISO 8601
    is accepted as well. Values without an offset are taken as UTC.

    Returns:
        Parsed datetime, or None when the value is not a recognizable date
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        iso_value = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
        try:
            parsed = datetime.fromisoformat(iso_value)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
