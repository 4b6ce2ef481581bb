"""
Shared date helpers for the quiz: UTC "today", week windows and the
YYYY-MM-DD strings Firestore submissions are grouped by.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional


def today_utc(now: Optional[datetime] = None) -> date:
    """Calendar date in UTC (what the server groups submissions by)."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date()


def start_of_week(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def to_yyyy_mm_dd(day: date) -> str:
    """Standardize date strings for queries and UI consistency."""
    return day.strftime("%Y-%m-%d")


def work_week(day: date, length: int = 5) -> List[date]:
    """Monday..Friday (by default) of the week containing `day`."""
    monday = start_of_week(day)
    return [monday + timedelta(days=i) for i in range(length)]


def last_days(day: date, count: int = 7) -> List[date]:
    """`count` consecutive days ending with `day`, oldest first."""
    return [day - timedelta(days=i) for i in range(count - 1, -1, -1)]
