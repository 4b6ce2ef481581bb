# services/summary.py
"""
Aggregate statistics over stored submissions: today's average and the
Monday-Friday weekly summary shown on Fridays.
"""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, Optional

from config import Config
from services.quiz_service import submissions
from services.quiz_service.utils import to_yyyy_mm_dd, today_utc, work_week


def _totals(day: date) -> tuple[int, int]:
    docs = submissions.submissions_on(day)
    correct = sum(int(d.get("numberOfCorrect", 0) or 0) for d in docs)
    return correct, len(docs)


def get_daily_summary(day: Optional[date] = None) -> Dict[str, Any]:
    """
    Fraction of questions answered correctly today across all players.
    averageCorrect is in [0, 1], rounded to 2 decimals.
    """
    day = day or today_utc()
    total_correct, total_submissions = _totals(day)
    per_quiz = Config.QUESTIONS_PER_QUIZ
    average = round(total_correct / (total_submissions * per_quiz), 2) if total_submissions else 0
    return {"averageCorrect": average, "totalSubmissions": total_submissions}


def get_weekly_summary(day: Optional[date] = None) -> Dict[str, Any]:
    """
    Monday..Friday of the week containing `day`.

    dailyAverageStats maps YYYY-MM-DD to the mean number of correct answers
    per submission that day; weeklyAverage is the fraction correct for the
    whole week.
    """
    week = work_week(day or today_utc())
    daily: Dict[str, float] = {}
    total_correct = 0
    total_submissions = 0

    for d in week:
        day_correct, day_submissions = _totals(d)
        daily[to_yyyy_mm_dd(d)] = day_correct / day_submissions if day_submissions else 0
        total_correct += day_correct
        total_submissions += day_submissions

    per_quiz = Config.QUESTIONS_PER_QUIZ
    weekly = round(total_correct / (total_submissions * per_quiz), 2) if total_submissions else 0

    return {
        "weeklyAverage": weekly,
        "totalSubmissions": total_submissions,
        "dailyAverageStats": daily,
        "startDate": to_yyyy_mm_dd(week[0]),
        "endDate": to_yyyy_mm_dd(week[-1]),
    }
