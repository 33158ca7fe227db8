from datetime import date, datetime, timedelta, timezone
from typing import Tuple

# Weeks run Sunday..Saturday everywhere in the tracker.
WEEK_START_WEEKDAY = 6  # date.weekday(): Monday=0 .. Sunday=6


def current_timestamp() -> datetime:
    """Get current UTC timestamp"""
    return datetime.now(timezone.utc)


def today_utc() -> date:
    """Calendar day used for snapshots; UTC so every worker agrees."""
    return current_timestamp().date()


def week_bounds(day: date) -> Tuple[date, date]:
    """Return (week_start, week_end) of the Sunday-start week containing ``day``."""
    offset = (day.weekday() - WEEK_START_WEEKDAY) % 7
    start = day - timedelta(days=offset)
    return start, start + timedelta(days=6)
