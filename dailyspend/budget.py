# dailyspend/budget.py
import logging
import sqlite3

from flask import Blueprint, jsonify, request

from . import db
from .helpers import get_json_body, parse_amount, parse_iso_date, today
from .models import DailyLimit
from .sessions import current_session, login_required

logger = logging.getLogger("dailyspend")

bp = Blueprint("budget", __name__, url_prefix="/budget")


def set_daily_limit(user_id, limit_amount, date):
    db.execute_db("""
        INSERT INTO daily_limits (user_id, limit_amount, date)
        VALUES (?, ?, ?)
        ON CONFLICT(user_id, date) DO UPDATE SET limit_amount = excluded.limit_amount
    """, (user_id, limit_amount, str(date)))


def get_daily_limit(user_id, date):
    row = db.query_db("SELECT * FROM daily_limits WHERE user_id=? AND date=?", (user_id, str(date)), one=True)
    return DailyLimit.from_row(row)


def get_daily_expenses(user_id, date):
    row = db.query_db(
        "SELECT SUM(amount) AS total FROM expenses WHERE user_id=? AND date(timestamp)=?",
        (user_id, str(date)), one=True
    )
    return float(row['total'] or 0) if row else 0.0


def daily_summary(user_id, date):
    limit = get_daily_limit(user_id, date)
    daily_limit = float(limit.limit_amount) if limit else 0.0
    total_spent = get_daily_expenses(user_id, date)
    return {
        "date": str(date),
        "dailyLimit": daily_limit,
        "totalSpent": total_spent,
        "remaining": daily_limit - total_spent,
        "percentUsed": (total_spent / daily_limit) * 100 if daily_limit > 0 else 0,
    }


@bp.route("", methods=["GET"])
@login_required
def get_budget():
    date = today()
    if request.args.get("date"):
        date = parse_iso_date(request.args.get("date"))
        if not date:
            return jsonify({"error": "Date must use the YYYY-MM-DD format"}), 400
    return jsonify(daily_summary(current_session().user_id, date))


@bp.route("", methods=["POST"])
@login_required
def update_budget():
    data, error = get_json_body(request)
    if error:
        return jsonify({"error": error}), 400

    if data.get('limitAmount') in (None, ''):
        return jsonify({"error": "Limit amount is required"}), 400
    limit_amount, error = parse_amount(data.get('limitAmount'), allow_zero=True)
    if error:
        return jsonify({"error": error}), 400

    date = today()
    if data.get('date'):
        date = parse_iso_date(data.get('date'))
        if not date:
            return jsonify({"error": "Date must use the YYYY-MM-DD format"}), 400

    try:
        set_daily_limit(current_session().user_id, limit_amount, date)
    except sqlite3.Error:
        logger.exception("Daily limit upsert failed")
        return jsonify({"error": "Failed to set daily limit"}), 500

    return jsonify({"success": True, "message": "Daily limit set successfully"})
