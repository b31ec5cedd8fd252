"""
project: Portfolio API
module: experience_api.py
License: MIT

Experience level API.

Public read endpoints resolve the configured start date against the stored
level table. The bulk replace endpoint is admin only and refuses the whole
update when validation reports any problem.
"""

from __future__ import annotations

import math

from flask import Blueprint, jsonify, request
from flask_login import current_user

from portfolio.experience import ValidationError, estimate_progression, resolve_level
from portfolio.experience.levels import as_dicts
from portfolio.routes.admin import admin_required
from portfolio.services import experience_service

bp_experience = Blueprint("experience", __name__, url_prefix="/api/experience")

NO_LEVEL_MESSAGE = "No experience level configured for this duration"


def _parse_years(raw):
    """Return a non-negative finite float or None."""
    try:
        years = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(years) or years < 0:
        return None
    return years


def _bad_years():
    return jsonify({"error": "bad_request", "message": "Invalid years parameter"}), 400


@bp_experience.route("/levels", methods=["GET"])
def list_levels():
    """Active levels ordered by minYears."""
    return jsonify(as_dicts(experience_service.load_table()))


@bp_experience.route("/levels/<years>", methods=["GET"])
def level_by_years(years):
    value = _parse_years(years)
    if value is None:
        return _bad_years()
    level = resolve_level(value, experience_service.load_table())
    if level is None:
        return jsonify({"error": "not_found", "message": NO_LEVEL_MESSAGE}), 404
    return jsonify(level.to_dict())


@bp_experience.route("/current", methods=["GET"])
def current():
    """Response: { years, level|null, progress, nextLevel|null, startDate }"""
    return jsonify(experience_service.current_experience())


@bp_experience.route("/progression", methods=["GET"])
def progression():
    """Progression for an explicit ``?years=`` value (defaults to current years)."""
    raw = request.args.get("years")
    if raw is None:
        return jsonify(experience_service.build_engine().progression().to_dict())
    value = _parse_years(raw)
    if value is None:
        return _bad_years()
    return jsonify(estimate_progression(value, experience_service.load_table()).to_dict())


@bp_experience.route("/timeline", methods=["GET"])
def timeline():
    return jsonify([entry.to_dict() for entry in experience_service.build_engine().timeline()])


@bp_experience.route("/levels", methods=["PUT"])
@admin_required
def replace_levels():
    """Bulk upsert keyed by label.

    Body: { "levels": [ {label, minYears, maxYears, color, icon, description, active}, ... ] }
    400 when 'levels' is not a list; 422 with every validation error otherwise.
    """
    data = request.get_json(silent=True) or {}
    levels = data.get("levels")
    if not isinstance(levels, list):
        return jsonify({"error": "bad_request", "message": "Levels must be an array"}), 400
    try:
        count = experience_service.replace_table(levels, actor=current_user.username)
    except ValidationError as exc:
        return (
            jsonify({"error": "validation_failed", "message": "Invalid experience level configuration", "errors": exc.errors}),
            422,
        )
    return jsonify({"message": "Experience levels updated successfully", "updated": count})
