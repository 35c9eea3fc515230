# dailyspend/auth.py
import logging
import sqlite3

from flask import Blueprint, jsonify, request
from werkzeug.security import check_password_hash, generate_password_hash

from . import db
from .categories import create_default_categories
from .helpers import get_json_body, is_valid_pin
from .models import User
from .sessions import (clear_session_cookie, create_session, current_session, delete_session,
                       login_required, session_cookie, set_session_cookie)

logger = logging.getLogger("dailyspend")

auth_bp = Blueprint("auth", __name__)


# ---------------- Users ----------------
def normalize_answer(answer):
    return str(answer).strip().lower()


def create_user(username, pin, security_answer=None, commit=True):
    pin_hash = generate_password_hash(pin)
    answer_hash = generate_password_hash(normalize_answer(security_answer)) if security_answer else None
    user_id, _ = db.execute_db(
        "INSERT INTO users (username, pin_hash, security_answer_hash) VALUES (?, ?, ?)",
        (username, pin_hash, answer_hash), commit=commit
    )
    return user_id


def get_user_by_username(username):
    row = db.query_db("SELECT * FROM users WHERE username=?", (username,), one=True)
    return User.from_row(row)


def get_user_by_id(user_id):
    row = db.query_db("SELECT id, username, created_at FROM users WHERE id=?", (user_id,), one=True)
    return User.from_row(row)


def reset_user_pin(username, new_pin):
    _, changed = db.execute_db(
        "UPDATE users SET pin_hash=? WHERE username=?",
        (generate_password_hash(new_pin), username)
    )
    return changed > 0


def verify_pin(username, pin):
    """Returns the public user record when the PIN matches, else None."""
    user = get_user_by_username(username)
    if user is None:
        return None
    if not check_password_hash(user.pin_hash, str(pin)):
        return None
    return {"id": user.id, "username": user.username}


def verify_security_answer(username, answer):
    user = get_user_by_username(username)
    if user is None or not user.has_security_answer:
        return False
    return check_password_hash(user.security_answer_hash, normalize_answer(answer))


# ---------------- Endpoints ----------------
@auth_bp.route('/register', methods=['POST'])
def register():
    data, error = get_json_body(request)
    if error:
        return jsonify({"error": error}), 400

    username = (data.get('username') or '')
    username = username.strip() if isinstance(username, str) else ''
    pin = data.get('pin')
    security_answer = data.get('securityAnswer')

    if not username or not pin:
        return jsonify({"error": "Username and PIN are required"}), 400
    if not is_valid_pin(pin):
        return jsonify({"error": "PIN must be exactly 6 digits"}), 400
    if not isinstance(security_answer, str) or len(security_answer.strip()) < 2:
        return jsonify({"error": "Security answer is required (min 2 characters)"}), 400

    # user row and default categories commit together
    try:
        user_id = create_user(username, pin, security_answer, commit=False)
        create_default_categories(user_id, commit=False)
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        return jsonify({"error": "Username already exists"}), 400
    except sqlite3.Error:
        db.rollback()
        logger.exception(f"Registration failed for '{username}'")
        return jsonify({"error": "Registration failed"}), 500

    logger.info(f"Registered user {user_id} ({username})")
    return jsonify({
        "success": True,
        "message": "User registered successfully",
        "userId": user_id
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data, error = get_json_body(request)
    if error:
        return jsonify({"error": error}), 400

    username = data.get('username')
    pin = data.get('pin')
    if not username or not pin:
        return jsonify({"error": "Username and PIN are required"}), 400

    user = verify_pin(str(username).strip(), pin)
    if not user:
        logger.info(f"Failed login for '{username}'")
        return jsonify({"error": "Invalid username or PIN"}), 401

    session_id = create_session(user['id'], user['username'])
    logger.info(f"User {user['id']} logged in")

    response = jsonify({"success": True, "user": user})
    return set_session_cookie(response, session_id)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session_id = session_cookie()
    if session_id and delete_session(session_id):
        logger.info("Session closed")

    response = jsonify({"success": True})
    return clear_session_cookie(response)


@auth_bp.route('/reset-pin', methods=['POST'])
def reset_pin():
    data, error = get_json_body(request)
    if error:
        return jsonify({"error": error}), 400

    username = data.get('username')
    security_answer = data.get('securityAnswer')
    new_pin = data.get('newPin')

    if not username or not security_answer or not new_pin:
        return jsonify({"error": "All fields are required"}), 400
    if not is_valid_pin(new_pin):
        return jsonify({"error": "PIN must be exactly 6 digits"}), 400

    username = str(username).strip()
    user = get_user_by_username(username)
    if user is None:
        return jsonify({"error": "User not found"}), 404
    if not user.has_security_answer:
        return jsonify({"error": "No security question set for this account"}), 400
    if not verify_security_answer(username, security_answer):
        logger.info(f"Wrong security answer for user {user.id}")
        return jsonify({"error": "Incorrect security answer"}), 401

    if not reset_user_pin(username, new_pin):
        return jsonify({"error": "Failed to reset PIN"}), 500

    logger.info(f"PIN reset for user {user.id}")
    return jsonify({"success": True, "message": "PIN reset successfully"})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    user = get_user_by_id(current_session().user_id)
    if user is None:
        return jsonify({"error": "User not found"}), 404
    return jsonify({"user": user.to_dict()})
