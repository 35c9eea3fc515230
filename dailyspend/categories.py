# dailyspend/categories.py
import logging
import sqlite3

from flask import Blueprint, jsonify, request

from . import db
from .helpers import get_json_body, parse_int
from .models import Category
from .sessions import current_session, login_required

logger = logging.getLogger("dailyspend")

bp = Blueprint("categories", __name__, url_prefix="/categories")

CATEGORY_TYPES = ("essential", "non-essential")

# top-level name -> (type, subcategories)
DEFAULT_CATEGORIES = [
    ("Essential", "essential", ["Food", "Transportation", "Bills"]),
    ("Non-Essential", "non-essential", ["Entertainment", "Shopping"]),
]


def create_category(user_id, name, type, parent_id=None, commit=True):
    category_id, _ = db.execute_db(
        "INSERT INTO categories (user_id, name, type, parent_id) VALUES (?, ?, ?, ?)",
        (user_id, name, type, parent_id), commit=commit
    )
    return category_id


def create_default_categories(user_id, commit=True):
    for name, cat_type, children in DEFAULT_CATEGORIES:
        parent_id = create_category(user_id, name, cat_type, commit=False)
        for child in children:
            create_category(user_id, child, cat_type, parent_id, commit=False)
    if commit:
        db.commit()


def get_categories(user_id):
    rows = db.query_db("SELECT * FROM categories WHERE user_id=? ORDER BY type, name", (user_id,))
    return [Category.from_row(r) for r in rows]


def get_category(user_id, category_id):
    row = db.query_db("SELECT * FROM categories WHERE id=? AND user_id=?", (category_id, user_id), one=True)
    return Category.from_row(row)


@bp.route("", methods=["GET"])
@login_required
def list_categories():
    categories = get_categories(current_session().user_id)
    return jsonify({"categories": [c.to_dict() for c in categories]})


@bp.route("", methods=["POST"])
@login_required
def add_category():
    user_id = current_session().user_id
    data, error = get_json_body(request)
    if error:
        return jsonify({"error": error}), 400

    name = data.get('name')
    name = name.strip() if isinstance(name, str) else ''
    cat_type = data.get('type')
    if not name or not cat_type:
        return jsonify({"error": "Name and type are required"}), 400
    if cat_type not in CATEGORY_TYPES:
        return jsonify({"error": "Type must be essential or non-essential"}), 400

    parent_id = None
    if data.get('parentId') not in (None, ''):
        parent_id = parse_int(data.get('parentId'))
        if parent_id is None:
            return jsonify({"error": "parentId must be an integer"}), 400
        if get_category(user_id, parent_id) is None:
            return jsonify({"error": "Parent category not found"}), 404

    try:
        category_id = create_category(user_id, name, cat_type, parent_id)
    except sqlite3.Error:
        logger.exception("Category insert failed")
        return jsonify({"error": "Failed to create category"}), 500

    return jsonify({
        "success": True,
        "categoryId": category_id,
        "message": "Category created successfully"
    }), 201
