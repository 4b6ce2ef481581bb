# services/quiz_service/date_keys.py
"""
Storage keys for a quiz date.

The canonical key is YYYYMMDD. Older versions of the app saved state under
whatever the locale produced that day (2024-3-7, 7/3/2024, 7.3.24, ...), so
lookups also enumerate every historic variant in a fixed lookup order.
"""

from __future__ import annotations
from datetime import date
from typing import List, Optional


def canonical_key(day: date) -> str:
    return f"{day.year:04d}{day.month:02d}{day.day:02d}"


def parse_canonical_key(key: str) -> date:
    """
    Interpret a YYYYMMDD key. Anything other than exactly 8 digits is a
    caller error and raises ValueError.
    """
    if len(key) != 8 or not key.isdigit():
        raise ValueError(f"not a YYYYMMDD key: {key!r}")
    return date(int(key[0:4]), int(key[4:6]), int(key[6:8]))


def storage_key(quiz_date: Optional[str] = None, today: Optional[date] = None) -> str:
    """Canonical key for a quiz date string, or for today when none is given."""
    if quiz_date:
        return canonical_key(parse_canonical_key(quiz_date))
    return canonical_key(today or date.today())


def _templates(year: str, short_year: str, month: str, day: str) -> List[str]:
    return [
        f"{year}{month}{day}",
        f"{year}-{month}-{day}",
        f"{day}/{month}/{year}",
        f"{day}.{month}.{year}",
        f"{month}/{day}/{year}",
        f"{day}.{month}.{short_year}",
    ]


def legacy_key_candidates(day: date) -> List[str]:
    """
    Every key format the app has used for `day`, padded variants first.
    Order matters: callers try them in sequence and the first hit wins.
    """
    year = f"{day.year:04d}"
    short_year = year[-2:]
    days = [f"{day.day:02d}", str(day.day)]
    months = [f"{day.month:02d}", str(day.month)]

    out: List[str] = []
    for d in days:
        for m in months:
            for key in _templates(year, short_year, m, d):
                if key not in out:
                    out.append(key)
    return out
