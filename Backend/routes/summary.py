# routes/summary.py
"""
Summary API routes: aggregate correctness across all players.
"""
import logging

from flask import Blueprint, jsonify
from services import summary

logger = logging.getLogger(__name__)

summary_bp = Blueprint("summary", __name__)


@summary_bp.get("/summary")
def daily_summary():
    """
    GET /api/summary

    Today's average fraction of correct answers and number of submissions.
    """
    try:
        return jsonify(summary.get_daily_summary()), 200
    except Exception:
        logger.exception("Error fetching summary")
        return jsonify({"error": "Failed to fetch summary"}), 500


@summary_bp.get("/weeklySummary")
def weekly_summary():
    """
    GET /api/weeklySummary

    Per-day averages for Monday..Friday of the current week plus the
    overall weekly average.
    """
    try:
        return jsonify(summary.get_weekly_summary()), 200
    except Exception:
        logger.exception("Error fetching weekly summary")
        return jsonify({"error": "Failed to fetch weekly summary"}), 500
