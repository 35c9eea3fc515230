# dailyspend/app.py

import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from . import auth, budget, categories, db, expenses

# ---------------- Configuration ----------------
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("dailyspend")

SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 7 days


def default_config():
    return {
        "DB_PATH": os.environ.get("DB_PATH", db.DB_PATH),
        "CORS_ORIGINS": os.environ.get("CORS_ORIGINS", "http://localhost:3000"),
        "AUTH_COOKIE_NAME": "sessionId",
        "AUTH_COOKIE_MAX_AGE": SESSION_MAX_AGE,
        "AUTH_COOKIE_SECURE": os.environ.get("APP_ENV") == "production",
    }


# ---------------- Flask App Factory ----------------
def create_app(test_config=None):
    app = Flask(__name__)
    app.config.update(default_config())
    if test_config:
        app.config.update(test_config)

    # CORS
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)

    # Blueprints
    app.register_blueprint(auth.auth_bp, url_prefix='/auth')
    app.register_blueprint(categories.bp)
    app.register_blueprint(expenses.bp)
    app.register_blueprint(budget.bp)

    # Initialize DB
    with app.app_context():
        db.init_db()

    app.teardown_appcontext(db.close_db)

    # ---------------- Errors ----------------
    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500

    # ---------------- Core Endpoints ----------------
    @app.route('/')
    def root():
        return jsonify({"msg": "dailyspend backend root"})

    @app.route('/health')
    def health():
        return jsonify({"status": "ok"})

    return app


# ---------------- Run ----------------
# relative imports: start with `python -m dailyspend.app`
if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=5000)
