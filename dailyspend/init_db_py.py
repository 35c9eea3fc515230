# dailyspend/init_db_py.py
"""Create the database file and schema without starting the web app.

    python -m dailyspend.init_db_py [path/to/db]
"""
import logging
import os
import sqlite3
import sys

from . import db

logger = logging.getLogger("dailyspend")


def list_tables(path):
    conn = sqlite3.connect(path)
    try:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        ).fetchall()
    finally:
        conn.close()
    return [r[0] for r in rows]


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else os.environ.get("DB_PATH", db.DB_PATH)

    db.init_db(path)
    tables = list_tables(path)
    print(f"Database ready at {os.path.abspath(path)}")
    print(f"Tables: {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
