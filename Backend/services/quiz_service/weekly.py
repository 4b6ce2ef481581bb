# services/quiz_service/weekly.py
"""
Player-side weekly summary: the player's own results from local state lined
up against the server's per-day averages.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from .date_keys import canonical_key
from .local_state import KeyValueStore, find_correct_count
from .utils import last_days

WEEK_DAYS = ["Mandag", "Tirsdag", "Onsdag", "Torsdag", "Fredag", "Lørdag", "Søndag"]
HISTORY_DAYS = 7


def is_friday(day: date, development: bool = False) -> bool:
    # In development, it's always Friday
    return development or day.weekday() == 4


@dataclass
class WeeklySummary:
    user_average: float
    server_average: float
    streak: int
    rows: List[Dict[str, Any]] = field(default_factory=list)


def user_daily_correct(store: KeyValueStore, today: date) -> Dict[str, Optional[int]]:
    """YYYYMMDD -> correct count for the last week, None where not played."""
    return {canonical_key(d): find_correct_count(store, d) for d in last_days(today, HISTORY_DAYS)}


def calculate_streak(daily: Dict[str, Optional[int]]) -> int:
    """Consecutive played days ending with the most recent one."""
    streak = 0
    for key in sorted(daily, reverse=True):
        if daily[key] is None:
            break
        streak += 1
    return streak


def build_weekly_summary(store: KeyValueStore, server: Dict[str, Any], today: date) -> WeeklySummary:
    daily_user = user_daily_correct(store, today)
    server_daily: Dict[str, float] = server.get("dailyAverageStats") or {}

    rows = []
    for index, (day_key, average) in enumerate(server_daily.items()):
        key = day_key.replace("-", "")
        rows.append({
            "day": WEEK_DAYS[index % len(WEEK_DAYS)],
            "userCorrect": daily_user.get(key) or 0,
            "averageCorrect": average or 0,
        })

    played = [v for v in daily_user.values() if v is not None]
    user_avg = sum(played) / len(played) if played else 0.0
    server_avg = sum(server_daily.values()) / len(server_daily) if server_daily else 0.0

    return WeeklySummary(
        user_average=user_avg,
        server_average=server_avg,
        streak=calculate_streak(daily_user),
        rows=rows,
    )
