# services/quiz_service/routes.py
import logging

from flask import Blueprint, current_app, request, jsonify

from . import questions
from . import submissions
from .date_keys import canonical_key
from .utils import today_utc

logger = logging.getLogger(__name__)

quiz_bp = Blueprint("quiz_bp", __name__)

# -------------------- Questions --------------------

@quiz_bp.get("/questions")
def get_questions():
    """
    GET /api/questions?date=2024-03-07

    Quiz file for the date (dashes optional); today (UTC) when omitted.
    404 is the normal "no quiz that day" answer.
    """
    key = questions.normalize_date_param(request.args.get("date")) or canonical_key(today_utc())
    if not questions.is_date_key(key):
        return jsonify({"message": "date must be YYYY-MM-DD or YYYYMMDD"}), 400

    data = questions.load_question_file(current_app.config["QUESTIONS_DIR"], key)
    if data is None:
        return jsonify({"message": "Questions for this date are not available."}), 404
    return jsonify(data), 200

@quiz_bp.get("/available-dates")
def get_available_dates():
    """Sorted YYYYMMDD dates that have a question file."""
    return jsonify(questions.available_dates(current_app.config["QUESTIONS_DIR"])), 200

# -------------------- Submissions --------------------

@quiz_bp.post("/submit")
def submit():
    """
    Store one anonymous result.

    Request body:
    {
        "answers": ["Mozart", "Oslo", ...],
        "numberOfCorrect": 3
    }
    """
    data = request.get_json(silent=True) or {}
    answers = data.get("answers")
    number_of_correct = data.get("numberOfCorrect")

    if not isinstance(answers, list):
        return jsonify({"error": "answers must be an array"}), 400
    if isinstance(number_of_correct, bool) or not isinstance(number_of_correct, int):
        return jsonify({"error": "numberOfCorrect must be an integer"}), 400

    try:
        doc_id = submissions.store_submission([str(a) for a in answers], number_of_correct)
    except Exception:
        logger.exception("Error saving submission")
        return jsonify({"error": "Failed to store submission"}), 500

    logger.info("Stored submission %s (%d correct)", doc_id, number_of_correct)
    return jsonify({"id": doc_id, "message": "Submission stored successfully."}), 200
