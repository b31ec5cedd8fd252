"""Admin routes: protected management endpoints.

Provides a small admin surface for the dashboard:
  * Dry-run validation of a candidate experience level table
  * Full level listing (inactive rows included)
  * Recent analytics events

Security model:
  * All routes require an authenticated user with role == 'admin'.
  * `admin_required` returns 401 JSON for anonymous callers and 403 JSON for
    authenticated non-admins.
"""

from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import Blueprint, jsonify, request
from flask_login import current_user

from portfolio.experience import validate_levels
from portfolio.experience.levels import as_dicts
from portfolio.services import analytics_service
from portfolio.services.experience_service import load_table

bp_admin = Blueprint("admin", __name__, url_prefix="/api/admin")


def admin_required(fn: Callable):
    """Decorator enforcing that current_user is an authenticated admin."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({"error": "unauthorized", "message": "Authentication required"}), 401
        if getattr(current_user, "role", "user") != "admin":
            return jsonify({"error": "forbidden", "message": "Admin access required"}), 403
        return fn(*args, **kwargs)

    return wrapper


@bp_admin.route("/experience/validate", methods=["POST"])
@admin_required
def validate_experience_levels():
    """Validate a candidate table without saving it.

    Body: { "levels": [...] }
    Response: { "ok": bool, "errors": [...] } (200 either way)
    """
    data = request.get_json(silent=True) or {}
    return jsonify(validate_levels(data.get("levels")).to_dict())


@bp_admin.route("/experience/levels")
@admin_required
def all_experience_levels():
    return jsonify(as_dicts(load_table(include_inactive=True)))


@bp_admin.route("/analytics/recent")
@admin_required
def recent_analytics():
    try:
        limit = int(request.args.get("limit", 50))
    except ValueError:
        return jsonify({"error": "bad_request", "message": "limit must be an integer"}), 400
    return jsonify([e.to_dict() for e in analytics_service.recent_events(limit)])
