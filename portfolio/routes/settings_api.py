"""Site settings API (admin only).

Values are stored as text. The experience start date key is validated as a
date before it is written so the public experience endpoints never see an
unparseable value.
"""

from flask import Blueprint, jsonify, request

from portfolio.experience import InvalidDateError
from portfolio.models import Setting
from portfolio.routes.admin import admin_required
from portfolio.services.settings_service import EXPERIENCE_START_KEY, set_experience_start_date

bp_settings = Blueprint("settings", __name__, url_prefix="/api/settings")


@bp_settings.route("/", methods=["GET"])
@admin_required
def list_settings():
    return jsonify([s.to_dict() for s in Setting.query.order_by(Setting.key).all()])


@bp_settings.route("/<key>", methods=["GET"])
@admin_required
def get_setting(key):
    row = Setting.query.filter_by(key=key).first()
    if not row:
        return jsonify({"error": "not_found", "message": "Setting not found"}), 404
    return jsonify(row.to_dict())


@bp_settings.route("/<key>", methods=["PUT"])
@admin_required
def update_setting(key):
    """Upsert a setting. Body: { "value": ..., "type": "string", "description": "" }"""
    data = request.get_json(silent=True) or {}
    value = data.get("value")
    if value is None or (isinstance(value, str) and not value.strip()):
        return jsonify({"error": "bad_request", "message": "value is required"}), 400
    setting_type = data.get("type") or "string"
    if setting_type not in Setting.SETTING_TYPES:
        return jsonify({"error": "bad_request", "message": f"type must be one of {', '.join(Setting.SETTING_TYPES)}"}), 400

    if key == EXPERIENCE_START_KEY:
        try:
            set_experience_start_date(value)
        except InvalidDateError as exc:
            return jsonify({"error": "bad_request", "message": str(exc)}), 400
        return jsonify(Setting.query.filter_by(key=key).first().to_dict())

    row = Setting.set(key, str(value), setting_type, data.get("description") or "")
    return jsonify(row.to_dict())
