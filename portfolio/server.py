"""
project: Portfolio API
module: server.py
License: MIT

Server bootstrap helpers.

Ensures the schema and seed rows exist, configures logging, and starts the
Flask development server.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from werkzeug.security import generate_password_hash

from portfolio import app, create_app, db
from portfolio.models import User

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Start the HTTP server after preparing the database and logging."""
    create_app()
    _configure_logging()
    logging.getLogger(__name__).info("Starting portfolio API on %s:%s", host, port)
    app.run(host=host, port=port, debug=debug)


def _configure_logging():
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/app.log. Retains a few backups to avoid growth.
    Safe to call repeatedly; existing root handlers are replaced.
    """
    log_dir = app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(LOG_FORMAT))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path


def ensure_admin(username: str, password: str = "changeme"):
    """Create ``username`` as an admin or promote the existing account.

    Returns (user, created).
    """
    user = User.query.filter_by(username=username).first()
    if not user:
        user = User(username=username, password=generate_password_hash(password), role="admin")
        db.session.add(user)
        db.session.commit()
        return user, True
    user.role = "admin"
    db.session.commit()
    return user, False
