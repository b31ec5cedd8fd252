"""Admin content management: dashboard, reports and CRUD for site content.

Routes are attached to ``bp_admin`` so they share its ``/api/admin`` prefix
and the ``admin_required`` guard:
  * GET  /dashboard and /analytics/{projects,traffic,geo,timeline}
  * CRUD for /projects, /contacts, /hire-requests, /testimonials
  * POST /contacts/<id>/reply, POST /hire-requests/<id>/respond
  * PUT  /testimonials/<id>/approve, PUT /testimonials/<id>/feature
"""

from __future__ import annotations

from flask import jsonify, request

from portfolio.routes.admin import admin_required, bp_admin
from portfolio.routes.public_api import invalid_payload, not_found
from portfolio.services import content_service as content
from portfolio.services.content_service import PayloadError


@bp_admin.route("/dashboard")
@admin_required
def dashboard():
    return jsonify(content.dashboard_stats())


@bp_admin.route("/analytics/projects")
@admin_required
def project_analytics():
    """Projects ordered by view count (highest first)."""
    return jsonify([p.to_dict() for p in content.projects_by_views()])


@bp_admin.route("/analytics/traffic")
@admin_required
def traffic_analytics():
    return jsonify([e.to_dict() for e in content.traffic_events()])


@bp_admin.route("/analytics/geo")
@admin_required
def geo_analytics():
    return jsonify(content.geo_breakdown())


@bp_admin.route("/analytics/timeline")
@admin_required
def timeline_analytics():
    return jsonify(content.daily_event_counts())


# ----------------------------- CRUD ----------------------------------------


def _register_crud(resource, slug: str, creatable: bool):
    """Attach list/detail/update/delete (and optionally create) for ``resource``."""

    def list_view():
        return jsonify([row.to_dict() for row in content.list_items(resource)])

    def detail_view(item_id):
        row = content.get(resource, item_id)
        if row is None:
            return not_found(resource)
        return jsonify(row.to_dict())

    def create_view():
        try:
            row = content.create(resource, request.get_json(silent=True))
        except PayloadError as exc:
            return invalid_payload(resource, exc)
        return jsonify(row.to_dict()), 201

    def update_view(item_id):
        try:
            row = content.update(resource, item_id, request.get_json(silent=True))
        except PayloadError as exc:
            return invalid_payload(resource, exc)
        if row is None:
            return not_found(resource)
        return jsonify(row.to_dict())

    def delete_view(item_id):
        if not content.delete(resource, item_id):
            return not_found(resource)
        return jsonify({"message": f"{resource.name} deleted successfully"})

    name = slug.replace("-", "_")
    rules = [
        (f"/{slug}", "list", list_view, ["GET"]),
        (f"/{slug}/<int:item_id>", "detail", detail_view, ["GET"]),
        (f"/{slug}/<int:item_id>", "update", update_view, ["PUT"]),
        (f"/{slug}/<int:item_id>", "delete", delete_view, ["DELETE"]),
    ]
    if creatable:
        rules.append((f"/{slug}", "create", create_view, ["POST"]))
    for rule, action, view, methods in rules:
        bp_admin.add_url_rule(rule, f"{name}_{action}", admin_required(view), methods=methods)


_register_crud(content.PROJECTS, "projects", creatable=True)
_register_crud(content.CONTACTS, "contacts", creatable=False)
_register_crud(content.HIRE_REQUESTS, "hire-requests", creatable=False)
_register_crud(content.TESTIMONIALS, "testimonials", creatable=True)


# ----------------------------- Workflow actions ----------------------------


def _answered(resource, row):
    if row is None:
        return not_found(resource)
    return jsonify(row.to_dict())


@bp_admin.route("/contacts/<int:item_id>/reply", methods=["POST"])
@admin_required
def reply_to_contact(item_id):
    """Body: { "replyMessage": "..." }. Marks the message responded."""
    data = request.get_json(silent=True) or {}
    try:
        row = content.reply_to_contact(item_id, data.get("replyMessage"))
    except PayloadError as exc:
        return invalid_payload(content.CONTACTS, exc)
    return _answered(content.CONTACTS, row)


@bp_admin.route("/hire-requests/<int:item_id>/respond", methods=["POST"])
@admin_required
def respond_to_hire_request(item_id):
    """Body: { "responseMessage": "..." }. Marks the request responded."""
    data = request.get_json(silent=True) or {}
    try:
        row = content.respond_to_hire_request(item_id, data.get("responseMessage"))
    except PayloadError as exc:
        return invalid_payload(content.HIRE_REQUESTS, exc)
    return _answered(content.HIRE_REQUESTS, row)


@bp_admin.route("/testimonials/<int:item_id>/approve", methods=["PUT"])
@admin_required
def approve_testimonial(item_id):
    return _answered(content.TESTIMONIALS, content.approve_testimonial(item_id))


@bp_admin.route("/testimonials/<int:item_id>/feature", methods=["PUT"])
@admin_required
def feature_testimonial(item_id):
    """Flip the featured flag."""
    return _answered(content.TESTIMONIALS, content.toggle_testimonial_featured(item_id))
