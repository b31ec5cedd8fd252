"""
project: Portfolio API
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

This module wires together the Flask app, SQLAlchemy and Flask-Login.
Configuration is sourced from environment variables with reasonable defaults
for development. A local `instance/` directory is used for SQLite and the log
file.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException

from portfolio.experience.years import utc_now

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    logging.getLogger(__name__).warning("Could not create instance path %s", app.instance_path)

secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")

# During pytest runs, isolate to a separate database file
if not database_url:
    is_pytest = bool(os.getenv("PYTEST_CURRENT_TEST"))
    db_filename = "portfolio_test.db" if is_pytest else "portfolio.db"
    db_path = Path(app.instance_path) / db_filename
    database_url = f"sqlite:///{db_path.as_posix()}"

app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
    # Reference start for "current experience" when no setting is stored
    EXPERIENCE_DEFAULT_START_DATE=os.getenv("EXPERIENCE_DEFAULT_START_DATE", "2019-01-01"),
    # Seed the stock level table on startup when it is empty
    EXPERIENCE_SEED_DEFAULTS=bool(os.getenv("EXPERIENCE_SEED_DEFAULTS", "1") == "1"),
    # Injectable clock; tests replace this with a fixed callable
    CLOCK=utc_now,
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    engine_opts["connect_args"] = {
        "timeout": 10,  # busy timeout (seconds) for sqlite
        "check_same_thread": False,
    }
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)
login_manager = LoginManager(app)


@login_manager.user_loader
def load_user(user_id):  # pragma: no cover - simple loader
    from portfolio.models.models import User

    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def _unauthorized():
    return jsonify({"error": "unauthorized", "message": "Authentication required"}), 401


# SQLite tuning (WAL + busy timeout) applied on every new DBAPI connection.
from sqlalchemy import event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: D401
    if dbapi_connection.__class__.__module__.split(".")[0] != "sqlite3":
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=10000")  # 10 seconds
    cursor.close()


# Register HTTP blueprints (import after app/db created)
from portfolio.routes import admin_content  # noqa: E402,F401  attaches content routes to bp_admin
from portfolio.routes.admin import bp_admin  # noqa: E402
from portfolio.routes.auth import bp_auth  # noqa: E402
from portfolio.routes.experience_api import bp_experience  # noqa: E402
from portfolio.routes.main import bp_main  # noqa: E402
from portfolio.routes.public_api import bp_public  # noqa: E402
from portfolio.routes.settings_api import bp_settings  # noqa: E402

app.register_blueprint(bp_main)
app.register_blueprint(bp_auth)
app.register_blueprint(bp_experience)
app.register_blueprint(bp_settings)
app.register_blueprint(bp_public)
app.register_blueprint(bp_admin)


def _bootstrap_database():
    """Create tables and seed the stock level table when it is empty."""
    from portfolio.models import models as _models  # noqa: F401
    from portfolio.services.experience_service import seed_default_levels

    db.create_all()
    if app.config.get("EXPERIENCE_SEED_DEFAULTS"):
        seed_default_levels()


def create_app():
    """Return the Flask app instance, ensuring the schema and seed rows exist.

    Idempotent; safe to call from the CLI, the server bootstrap and tests.
    """
    with app.app_context():
        _bootstrap_database()
    return app


@app.errorhandler(HTTPException)
def http_error(e):
    return jsonify({"error": e.name.lower().replace(" ", "_"), "message": e.description}), e.code


# Error handling: log details with a short id and return a JSON 500
@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal_error", "message": "Unexpected server error", "error_id": error_id}), 500
