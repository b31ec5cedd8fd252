"""
project: Portfolio API
module: main.py
License: MIT

Core application routes: health check.
"""

from flask import Blueprint, jsonify

bp_main = Blueprint("main", __name__)


@bp_main.route("/api/health")
def health():
    """Liveness check. Response: { "status": "OK", "message": "..." }"""
    return jsonify({"status": "OK", "message": "Portfolio API is running"})
