"""UTC timestamp helpers.

Timestamps are stored as ISO-8601 strings with a fixed microsecond precision
so that string ordering matches chronological ordering.
"""

from datetime import datetime, timedelta

import pytz


def utc_now() -> str:
    return datetime.now(pytz.utc).isoformat(timespec="microseconds")


def utc_now_after(previous: str) -> str:
    """Return the current time, or one microsecond past previous if the clock has not moved."""
    now = datetime.now(pytz.utc)
    floor = datetime.fromisoformat(previous) + timedelta(microseconds=1)
    return max(now, floor).isoformat(timespec="microseconds")
