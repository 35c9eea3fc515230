# dailyspend/sessions.py
"""Opaque-token session store kept in the ``sessions`` table.

A session is created on login and deleted on logout. There is no
server-side expiry; the cookie's max-age is the only lifetime.
"""
import logging
import secrets
from functools import wraps

from flask import current_app, g, jsonify, request

from . import db
from .models import Session

logger = logging.getLogger("dailyspend")


def create_session(user_id, username):
    session_id = secrets.token_urlsafe(32)
    db.execute_db(
        "INSERT INTO sessions (session_id, user_id, username) VALUES (?, ?, ?)",
        (session_id, user_id, username)
    )
    return session_id


def get_session(session_id):
    if not session_id:
        return None
    row = db.query_db(
        "SELECT session_id, user_id, username, created_at FROM sessions WHERE session_id=?",
        (session_id,), one=True
    )
    return Session.from_row(row)


def delete_session(session_id):
    _, removed = db.execute_db("DELETE FROM sessions WHERE session_id=?", (session_id,))
    return removed > 0


def session_cookie():
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])


def set_session_cookie(response, session_id):
    cfg = current_app.config
    response.set_cookie(
        cfg["AUTH_COOKIE_NAME"],
        session_id,
        max_age=cfg["AUTH_COOKIE_MAX_AGE"],
        httponly=True,
        secure=cfg["AUTH_COOKIE_SECURE"],
        samesite="Lax",
        path="/",
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(current_app.config["AUTH_COOKIE_NAME"], path="/")
    return response


def current_session():
    return getattr(g, "session", None)


def login_required(view):
    """Resolve the session cookie before the view runs, 401 otherwise."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        session = get_session(session_cookie())
        if session is None:
            return jsonify({"error": "Unauthorized"}), 401
        g.session = session
        return view(*args, **kwargs)
    return wrapped
