"""Authentication routes: JSON login, logout and current-user lookup."""

import datetime
import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy import func

from portfolio import db
from portfolio.logging_utils import get_logger
from portfolio.models import User

bp_auth = Blueprint("auth", __name__, url_prefix="/api/auth")

events_log = get_logger("portfolio.auth")


@bp_auth.route("/login", methods=["POST"])
def login():
    """Log in with ``{"username": ..., "password": ...}``; username OR email accepted.

    Response: { "user": {...} } or 401 on bad credentials.
    """
    data = request.get_json(silent=True) or {}
    ident = (data.get("username") or "").strip()
    password = data.get("password") or ""
    if not ident or not password:
        return jsonify({"error": "bad_request", "message": "username and password are required"}), 400

    # Case-insensitive username/email lookup
    user = User.query.filter(func.lower(User.username) == ident.lower()).first()
    if not user and "@" in ident:
        user = User.query.filter(func.lower(User.email) == ident.lower()).first()
    if not user or not user.check_password(password):
        logging.info("Login failed for identifier=%s", ident)
        return jsonify({"error": "unauthorized", "message": "Invalid credentials"}), 401

    login_user(user)
    user.last_login = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
    db.session.commit()
    events_log.info(event="login", user=user.username)
    return jsonify({"user": user.to_dict()})


@bp_auth.route("/logout", methods=["POST"])
@login_required
def logout():
    username = current_user.username
    logout_user()
    events_log.info(event="logout", user=username)
    return jsonify({"ok": True})


@bp_auth.route("/me")
@login_required
def me():
    return jsonify({"user": current_user.to_dict()})
