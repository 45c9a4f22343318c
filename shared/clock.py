"""Time helpers shared by handlers and the document store."""

from datetime import datetime, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Example: 2026-03-01T09:30:00.123Z
    """
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def unix_millis(moment: datetime) -> int:
    """Whole milliseconds since the epoch."""
    return (moment.astimezone(timezone.utc) - EPOCH) // timedelta(milliseconds=1)
