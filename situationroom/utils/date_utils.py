"""Date parsing utilities for SituationRoom.

GDELT ``seendate`` values are compact 14-digit UTC strings (YYYYMMDDHHMMSS).
They are carried raw through the boundary and parsed on demand here. Parsing
never raises: absent or malformed values yield None.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as dateutil_parser

_SEENDATE_LENGTH = 14
_SEENDATE_FORMAT = "%Y%m%d%H%M%S"


def parse_seendate(raw: Optional[str]) -> Optional[datetime]:
    """Parse a GDELT compact timestamp into an aware UTC datetime.

    Args:
        raw: String such as ``"20240115123045"``.

    Returns:
        ``datetime(2024, 1, 15, 12, 30, 45, tzinfo=UTC)``, or None when the value
        is absent, not exactly 14 characters, or not a valid date.
    """
    if not raw or len(raw) != _SEENDATE_LENGTH or not raw.isdigit():
        return None
    try:
        return datetime.strptime(raw, _SEENDATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_iso_datetime(raw: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp (NewsAPI ``publishedAt``); None on failure."""
    if not raw:
        return None
    try:
        parsed = dateutil_parser.isoparse(raw)
    except (ValueError, OverflowError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_local(dt: Optional[datetime]) -> str:
    """Render a datetime in the local timezone for popup and feed display."""
    if dt is None:
        return ""
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")
