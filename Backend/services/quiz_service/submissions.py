# services/quiz_service/submissions.py
from __future__ import annotations
from datetime import date
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from services.firebase import get_db
from config import Config

from .utils import to_yyyy_mm_dd, today_utc


def _collection():
    return get_db().collection(Config.SUBMISSIONS_COLLECTION)


def store_submission(answers: List[str], number_of_correct: int, day: Optional[date] = None) -> str:
    """Add one anonymous submission and return its document id."""
    _, ref = _collection().add({
        "numberOfCorrect": number_of_correct,
        "answers": answers,
        "createdAt": firestore.SERVER_TIMESTAMP,
        "submissionDate": to_yyyy_mm_dd(day or today_utc()),
    })
    return ref.id


def submissions_on(day: date) -> List[Dict[str, Any]]:
    q = _collection().where("submissionDate", "==", to_yyyy_mm_dd(day))
    return [d.to_dict() or {} for d in q.stream()]
