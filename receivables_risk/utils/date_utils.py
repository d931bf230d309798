"""Date manipulation utilities"""

import math
from datetime import date, datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 86_400


def parse_date(value: str) -> Optional[datetime]:
    """
    Parse an ISO-like date or datetime string into a naive UTC datetime.

    Returns None for empty or unparseable input instead of raising.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return to_naive_utc(parsed)


def to_naive_utc(moment: datetime | date) -> datetime:
    """Normalize a date or datetime to a naive datetime in UTC"""
    if not isinstance(moment, datetime):
        return datetime(moment.year, moment.month, moment.day)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def ceil_days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, rounded up (negative when end precedes start)"""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def utc_now() -> datetime:
    """Current moment as a naive UTC datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
