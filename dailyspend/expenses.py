# dailyspend/expenses.py
import logging
import sqlite3
from datetime import datetime, timedelta

from flask import Blueprint, jsonify, request

from . import db
from .categories import get_category
from .helpers import get_json_body, parse_amount, parse_date, parse_int, parse_iso_date, today
from .models import Expense
from .sessions import current_session, login_required

logger = logging.getLogger("dailyspend")

bp = Blueprint("expenses", __name__, url_prefix="/expenses")

PERIODS = ("week", "month", "year", "all")
# strftime patterns for the stats buckets
GROUP_FORMATS = {
    "day": "%Y-%m-%d",
    "week": "%Y-W%W",
    "month": "%Y-%m",
}
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


# ---------------- Queries ----------------
def create_expense(user_id, amount, category_id, description="", timestamp=None):
    if timestamp is None:
        timestamp = datetime.now()
    expense_id, _ = db.execute_db(
        "INSERT INTO expenses (user_id, amount, category_id, description, timestamp) VALUES (?, ?, ?, ?, ?)",
        (user_id, amount, category_id, description, timestamp.strftime(TIMESTAMP_FORMAT))
    )
    return expense_id


def get_expenses(user_id, start_date=None, end_date=None):
    """Expenses with their category, bounds are inclusive calendar dates."""
    query = """
        SELECT e.*, c.name AS category_name, c.type AS category_type
        FROM expenses e
        JOIN categories c ON e.category_id = c.id
        WHERE e.user_id = ?
    """
    params = [user_id]
    if start_date:
        query += " AND date(e.timestamp) >= ?"
        params.append(str(start_date))
    if end_date:
        query += " AND date(e.timestamp) <= ?"
        params.append(str(end_date))
    query += " ORDER BY e.timestamp DESC, e.id DESC"

    return [Expense.from_row(r) for r in db.query_db(query, params)]


def delete_expense(user_id, expense_id):
    _, removed = db.execute_db("DELETE FROM expenses WHERE id=? AND user_id=?", (expense_id, user_id))
    return removed > 0


def get_expense_stats(user_id, start_date, end_date, group_by="day"):
    rows = db.query_db("""
        SELECT strftime(?, e.timestamp) AS period,
               c.type AS category_type,
               c.name AS category_name,
               SUM(e.amount) AS total_amount,
               COUNT(*) AS transaction_count
        FROM expenses e
        JOIN categories c ON e.category_id = c.id
        WHERE e.user_id = ? AND date(e.timestamp) BETWEEN ? AND ?
        GROUP BY period, c.type, c.name
        ORDER BY period, total_amount DESC, c.type, c.name
    """, (GROUP_FORMATS[group_by], user_id, str(start_date), str(end_date)))
    return [db.row_to_dict(r) for r in rows]


def resolve_date_range(period=None, start=None, end=None, on=None):
    """
    Turn the request's period keyword or explicit bounds into
    (start_date, end_date, error). Missing bounds mean unbounded.
    """
    on = on or today()

    if period:
        if period not in PERIODS:
            return None, None, f"Invalid period: {period}"
        if period == "week":
            # weeks start on Sunday
            return on - timedelta(days=(on.weekday() + 1) % 7), None, None
        if period == "month":
            return on.replace(day=1), None, None
        if period == "year":
            return on.replace(month=1, day=1), None, None
        return None, None, None

    if start and end:
        start_date, end_date = parse_iso_date(start), parse_iso_date(end)
        if not start_date or not end_date:
            return None, None, "Dates must use the YYYY-MM-DD format"
        return start_date, end_date, None

    return on, on, None


# ---------------- Endpoints ----------------
@bp.route("", methods=["GET"])
@login_required
def list_expenses():
    start_date, end_date, error = resolve_date_range(
        request.args.get("period"),
        request.args.get("startDate"),
        request.args.get("endDate"),
    )
    if error:
        return jsonify({"error": error}), 400

    expenses = get_expenses(current_session().user_id, start_date, end_date)
    return jsonify({"expenses": [e.to_dict() for e in expenses]})


@bp.route("", methods=["POST"])
@login_required
def add_expense():
    user_id = current_session().user_id
    data, error = get_json_body(request)
    if error:
        return jsonify({"error": error}), 400

    raw_amount = data.get('amount')
    raw_category = data.get('categoryId')
    if raw_amount in (None, '') or raw_category in (None, ''):
        return jsonify({"error": "Amount and category are required"}), 400

    amount, error = parse_amount(raw_amount)
    if error:
        return jsonify({"error": error}), 400

    category_id = parse_int(raw_category)
    if category_id is None:
        return jsonify({"error": "categoryId must be an integer"}), 400
    if get_category(user_id, category_id) is None:
        return jsonify({"error": "Category not found"}), 404

    timestamp = None
    if data.get('date'):
        day = parse_date(data.get('date'))
        if not day:
            return jsonify({"error": "Invalid date"}), 400
        timestamp = datetime.combine(day, datetime.now().time().replace(microsecond=0))

    desc = data.get('description') or ''
    desc = str(desc).strip()[:1000]

    try:
        expense_id = create_expense(user_id, amount, category_id, desc, timestamp)
    except sqlite3.Error:
        logger.exception("Expense insert failed")
        return jsonify({"error": "Failed to create expense"}), 500

    return jsonify({
        "success": True,
        "expenseId": expense_id,
        "message": "Expense added successfully"
    }), 201


@bp.route("/<int:expense_id>", methods=["DELETE"])
@login_required
def remove_expense(expense_id):
    if not delete_expense(current_session().user_id, expense_id):
        return jsonify({"error": "Expense not found"}), 404
    return jsonify({"success": True})


@bp.route("/stats", methods=["GET"])
@login_required
def expense_stats():
    start, end = request.args.get("startDate"), request.args.get("endDate")
    group_by = request.args.get("groupBy") or "day"

    if not start or not end:
        return jsonify({"error": "Start and end dates are required"}), 400
    start_date, end_date = parse_iso_date(start), parse_iso_date(end)
    if not start_date or not end_date:
        return jsonify({"error": "Dates must use the YYYY-MM-DD format"}), 400
    if group_by not in GROUP_FORMATS:
        return jsonify({"error": "groupBy must be day, week or month"}), 400

    stats = get_expense_stats(current_session().user_id, start_date, end_date, group_by)
    return jsonify({"stats": stats})
