# services/quiz_service/evaluator.py
"""
Free-text answer checking.

An answer is accepted when, after lower-casing and trimming, it equals the
canonical answer, or is within `threshold` edits (Levenshtein) of any alias
or of the canonical answer itself. Typos inside the tolerance are accepted on
purpose.
"""

from __future__ import annotations
from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein

DEFAULT_THRESHOLD = 2


def normalize(text: Optional[str]) -> str:
    return (text or "").lower().strip()


class AnswerEvaluator:
    """Holds the edit-distance tolerance so it can be configured per app/test."""

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        if threshold < 0:
            raise ValueError("threshold must be >= 0")
        self.threshold = threshold

    def _close(self, a: str, b: str) -> bool:
        # score_cutoff lets rapidfuzz stop early once the distance exceeds it
        return Levenshtein.distance(a, b, score_cutoff=self.threshold) <= self.threshold

    def is_alias_correct(self, user_answer: Optional[str], aliases: Optional[Iterable[str]]) -> bool:
        user = normalize(user_answer)
        if not user:
            return False
        return any(self._close(user, normalize(alias)) for alias in aliases or ())

    def is_correct(
        self,
        user_answer: Optional[str],
        canonical_answer: Optional[str],
        aliases: Optional[Iterable[str]] = None,
    ) -> bool:
        user = normalize(user_answer)
        if not user:
            return False
        correct = normalize(canonical_answer)
        if user == correct:
            return True
        if self.is_alias_correct(user, aliases):
            return True
        return bool(correct) and self._close(user, correct)


def is_correct(
    user_answer: Optional[str],
    canonical_answer: Optional[str],
    aliases: Optional[Iterable[str]] = None,
    threshold: int = DEFAULT_THRESHOLD,
) -> bool:
    return AnswerEvaluator(threshold).is_correct(user_answer, canonical_answer, aliases)
