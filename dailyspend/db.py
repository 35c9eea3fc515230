# dailyspend/db.py
import logging
import os
import sqlite3

from flask import current_app, g

logger = logging.getLogger("dailyspend")

DB_PATH = os.environ.get("DB_PATH", os.path.join(os.path.dirname(__file__), "..", "data", "expense-tracker.db"))
SCHEMA_FILE = os.path.join(os.path.dirname(__file__), "init_db.sql")


def _connect(path):
    # ensure directory exists
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db():
    db = getattr(g, '_database', None)
    if db is None:
        db = g._database = _connect(current_app.config.get("DB_PATH", DB_PATH))
    return db


def close_db(exception=None):
    db = g.pop('_database', None)
    if db is not None:
        try:
            db.close()
        except sqlite3.Error:
            logger.exception("Error closing DB connection")


def query_db(query, args=(), one=False):
    cur = get_db().execute(query, args)
    rv = cur.fetchall()
    cur.close()
    return (rv[0] if rv else None) if one else rv


def execute_db(query, args=(), commit=True):
    """Run a write statement. Returns (lastrowid, rowcount).

    With commit=False the statement stays in the open transaction; the
    caller finishes it with commit() or rollback().
    """
    conn = get_db()
    cur = conn.cursor()
    try:
        cur.execute(query, args)
        if commit:
            conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    last, changed = cur.lastrowid, cur.rowcount
    cur.close()
    return last, changed


def commit():
    get_db().commit()


def rollback():
    get_db().rollback()


def row_to_dict(row):
    """Convert sqlite3.Row to dict"""
    if row is None:
        return None
    return {key: row[key] for key in row.keys()}


def init_db(path=None):
    """
    Create the schema from init_db.sql next to this module.
    The script only uses IF NOT EXISTS so it is safe to run at every startup.
    """
    if not os.path.exists(SCHEMA_FILE):
        raise FileNotFoundError(f"init_db.sql not found at expected path: {SCHEMA_FILE}")

    if path is None:
        path = current_app.config.get("DB_PATH", DB_PATH)

    conn = _connect(path)
    try:
        with open(SCHEMA_FILE, 'r', encoding='utf-8') as f:
            sql = f.read()
        conn.executescript(sql)
        conn.commit()
    finally:
        conn.close()
    logger.info(f"Database initialized at {os.path.abspath(path)}")
    return path
