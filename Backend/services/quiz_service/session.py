# services/quiz_service/session.py
"""
One player's run through a day's quiz.

Flow: load() fetches the questions and any saved state (migrating old
storage keys), submit() scores and saves the answers and reports the score
to the server, toggle_overturn() lets the player mark a rejected answer as
right. Network failures are logged and never undo local results.
"""

from __future__ import annotations
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from config import Config
from .date_keys import storage_key, canonical_key
from .evaluator import AnswerEvaluator
from .local_state import (
    ANSWERS, CORRECT, OVERTURNS, KeyValueStore, StorageError, resolve_day_state, save_slots,
)
from .questions import Question
from .weekly import WeeklySummary, build_weekly_summary, is_friday

logger = logging.getLogger(__name__)

INCOMPLETE_MESSAGE = "Vennligst fyll ut alle svarene før du sender inn."

CORRECT_MARK = "🟩"
OVERTURNED_MARK = "🟨"
WRONG_MARK = "🟥"

# Per-question verdicts
VERDICT_CORRECT = "correct"
VERDICT_ALIAS = "alias"
VERDICT_OVERTURNED = "overturned"
VERDICT_WRONG = "wrong"


class IncompleteAnswersError(ValueError):
    def __init__(self, message: str = INCOMPLETE_MESSAGE):
        super().__init__(message)


class QuizSession:
    def __init__(self, api, store: KeyValueStore, evaluator: Optional[AnswerEvaluator] = None,
                 quiz_date: Optional[str] = None, today: Optional[date] = None,
                 share_url: Optional[str] = None):
        self.api = api
        self.store = store
        self.evaluator = evaluator or AnswerEvaluator(Config.FUZZY_THRESHOLD)
        self.quiz_date = quiz_date
        self.today = today or date.today()
        self.share_url = share_url or Config.SHARE_URL
        self.key = storage_key(quiz_date, self.today)

        self.questions: List[Question] = []
        self.theme: Optional[str] = None
        self.announcement: Optional[str] = None
        self.answers: List[str] = []
        self.overturns: List[bool] = []
        self.submitted = False
        self.prev_date: Optional[str] = None
        self.next_date: Optional[str] = None
        self.average_correct: Optional[float] = None
        self.total_submissions: Optional[int] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self) -> "QuizSession":
        self._load_questions()

        state = resolve_day_state(self.store, self.quiz_date, self.today)
        if state.answers is not None:
            self.answers = [str(a) for a in state.answers]
            self.submitted = True
            self.fetch_summary()
        self.overturns = [bool(o) for o in state.overturns]

        self._load_neighbours()
        return self

    def _load_questions(self) -> None:
        try:
            quiz = self.api.fetch_questions(self.quiz_date)
        except requests.RequestException as e:
            logger.error("Failed to fetch questions: %s", e)
            return
        if quiz is None:
            logger.info("No quiz for %s", self.key)
            return
        self.questions = list(quiz.questions)
        self.theme = quiz.theme
        self.announcement = quiz.announcement

    def _load_neighbours(self) -> None:
        try:
            dates = self.api.available_dates()
        except requests.RequestException as e:
            logger.error("Failed to fetch available dates: %s", e)
            return
        if self.key in dates:
            i = dates.index(self.key)
            self.prev_date = dates[i - 1] if i > 0 else None
            self.next_date = dates[i + 1] if i < len(dates) - 1 else None
        else:
            self.prev_date = dates[-1] if dates else None
            self.next_date = None

    def fetch_summary(self) -> None:
        """Today's averages; only shown when playing today's quiz."""
        if self.quiz_date:
            return
        try:
            data = self.api.summary()
        except requests.RequestException as e:
            logger.error("Couldn't fetch summary: %s", e)
            return
        self.average_correct = data.get("averageCorrect")
        self.total_submissions = data.get("totalSubmissions")

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def _answer(self, index: int) -> Optional[str]:
        return self.answers[index] if index < len(self.answers) else None

    def is_correct(self, index: int) -> bool:
        q = self.questions[index]
        return self.evaluator.is_correct(self._answer(index), q.answer, q.aliases)

    def is_alias_correct(self, index: int) -> bool:
        return self.evaluator.is_alias_correct(self._answer(index), self.questions[index].aliases)

    def is_overturned(self, index: int) -> bool:
        return index < len(self.overturns) and self.overturns[index]

    def result_for(self, index: int) -> str:
        if self.is_correct(index):
            return VERDICT_ALIAS if self.is_alias_correct(index) else VERDICT_CORRECT
        if self.is_overturned(index):
            return VERDICT_OVERTURNED
        return VERDICT_WRONG

    def number_of_correct(self) -> int:
        return sum(1 for i in range(len(self.questions)) if self.is_correct(i))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def submit(self, answers: List[str]) -> int:
        """
        Score and save the answers, then report the score. Returns the number
        of correct answers. Raises IncompleteAnswersError when any answer is
        blank, and StorageError (state untouched) when saving fails.
        """
        if len(answers) != len(self.questions) or any(not (a or "").strip() for a in answers):
            raise IncompleteAnswersError()

        previous = self.answers
        self.answers = list(answers)
        correct = [self.is_correct(i) for i in range(len(self.questions))]
        try:
            save_slots(self.store, self.key, {CORRECT: correct, ANSWERS: self.answers})
        except StorageError:
            logger.exception("Could not save answers for %s", self.key)
            self.answers = previous
            raise
        self.submitted = True

        number_of_correct = sum(correct)
        try:
            result = self.api.submit(self.answers, number_of_correct)
            logger.info("Submission successful: %s", result)
        except requests.RequestException as e:
            logger.error("Error submitting answers: %s", e)

        self.fetch_summary()
        return number_of_correct

    def toggle_overturn(self, index: int) -> bool:
        """Flip the player's own "I was right" mark; returns the new flag."""
        if not 0 <= index < len(self.questions):
            raise IndexError(index)

        new = [self.is_overturned(i) for i in range(len(self.questions))]
        new[index] = not new[index]
        correct = [self.is_correct(i) or new[i] for i in range(len(self.questions))]
        try:
            save_slots(self.store, self.key, {OVERTURNS: new, CORRECT: correct})
        except StorageError:
            logger.exception("Could not save overturns for %s", self.key)
            return self.is_overturned(index)
        self.overturns = new
        return new[index]

    # ------------------------------------------------------------------
    # Sharing / summaries
    # ------------------------------------------------------------------
    def share_text(self) -> str:
        marks = []
        for i in range(len(self.questions)):
            if self.is_correct(i):
                marks.append(CORRECT_MARK)
            elif self.is_overturned(i):
                marks.append(OVERTURNED_MARK)
            else:
                marks.append(WRONG_MARK)

        url = self.share_url
        if self.quiz_date and self.quiz_date != canonical_key(self.today):
            url = f"{url}?date={self.quiz_date}"

        legend = f"\n{OVERTURNED_MARK} = rettet selv" if any(self.overturns) else ""
        theme = f" Dagens tema: {self.theme}" if self.theme else ""
        return f"{''.join(marks)}{legend}\nSpill fem kjappe på: {url}{theme}"

    def weekly_summary(self) -> Optional[WeeklySummary]:
        """Fridays only (every day in development)."""
        if not self.submitted or not is_friday(self.today, Config.is_development()):
            return None
        try:
            server: Dict[str, Any] = self.api.weekly_summary()
        except requests.RequestException as e:
            logger.error("Failed to fetch weekly summary: %s", e)
            return None
        return build_weekly_summary(self.store, server, self.today)
