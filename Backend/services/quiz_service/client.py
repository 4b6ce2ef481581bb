# services/quiz_service/client.py
"""
Thin HTTP client for the quiz API, used by the player session.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

import requests

from config import Config
from .questions import QuizData


class QuizApiClient:
    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or Config.QUIZ_API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else Config.REQUEST_TIMEOUT

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/{path.lstrip('/')}"

    def _get(self, path: str, **params) -> requests.Response:
        return self.session.get(self._url(path), params=params or None, timeout=self.timeout)

    def fetch_questions(self, quiz_date: Optional[str] = None) -> Optional[QuizData]:
        """Quiz for a YYYYMMDD date (today when None); None when there is no quiz."""
        resp = self._get("questions", **({"date": quiz_date} if quiz_date else {}))
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return QuizData.from_json(resp.json())

    def available_dates(self) -> List[str]:
        resp = self._get("available-dates")
        resp.raise_for_status()
        return list(resp.json())

    def submit(self, answers: List[str], number_of_correct: int) -> Dict[str, Any]:
        resp = self.session.post(
            self._url("submit"),
            json={"answers": answers, "numberOfCorrect": number_of_correct},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def summary(self) -> Dict[str, Any]:
        resp = self._get("summary")
        resp.raise_for_status()
        return resp.json()

    def weekly_summary(self) -> Dict[str, Any]:
        resp = self._get("weeklySummary")
        resp.raise_for_status()
        return resp.json()
