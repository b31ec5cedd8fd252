"""
project: Portfolio API
module: public_api.py
License: MIT

Visitor-facing content endpoints: project listing and view pings, the contact
and "hire me" forms, and approved testimonials.

Form submissions only accept the visitor fields (name, email, message and, for
hire requests, budget and timeline); moderation fields such as ``status`` or
``approved`` are ignored here and set by the admin surface.
"""

from flask import Blueprint, jsonify, request

from portfolio.services import analytics_service
from portfolio.services import content_service as content
from portfolio.services.content_service import PayloadError

bp_public = Blueprint("public", __name__, url_prefix="/api")


def not_found(resource):
    return jsonify({"error": "not_found", "message": f"{resource.name} not found"}), 404


def invalid_payload(resource, exc: PayloadError):
    return jsonify({"error": "bad_request", "message": f"Invalid {resource.name.lower()} data", "errors": exc.errors}), 400


# ----------------------------- Projects ------------------------------------


@bp_public.route("/projects", methods=["GET"])
def list_projects():
    return jsonify([p.to_dict() for p in content.list_items(content.PROJECTS, newest_first=False)])


@bp_public.route("/projects/<int:project_id>", methods=["GET"])
def project_detail(project_id):
    project = content.get(content.PROJECTS, project_id)
    if project is None:
        return not_found(content.PROJECTS)
    return jsonify(project.to_dict())


@bp_public.route("/projects/<int:project_id>/view", methods=["POST"])
def project_view(project_id):
    """Count one view. Response: the project with its updated ``views``."""
    project = content.record_project_view(project_id)
    if project is None:
        return not_found(content.PROJECTS)
    return jsonify(project.to_dict())


@bp_public.route("/projects/<int:project_id>/image", methods=["GET"])
def project_image(project_id):
    project = content.get(content.PROJECTS, project_id)
    if project is None:
        return not_found(content.PROJECTS)
    return jsonify({"image": project.image})


# ----------------------------- Forms ---------------------------------------


def _submit(resource, page):
    try:
        row = content.create(resource, request.get_json(silent=True), allowed=content.PUBLIC_SUBMIT_KEYS)
    except PayloadError as exc:
        return invalid_payload(resource, exc)
    analytics_service.track(page, f"{page}_submit")
    return jsonify(row.to_dict()), 201


@bp_public.route("/contact", methods=["POST"])
def submit_contact():
    return _submit(content.CONTACTS, "contact")


@bp_public.route("/hire", methods=["POST"])
def submit_hire_request():
    return _submit(content.HIRE_REQUESTS, "hire")


# ----------------------------- Testimonials --------------------------------


@bp_public.route("/testimonials", methods=["GET"])
def list_testimonials():
    """Approved testimonials only, featured first. Emails are not exposed."""
    return jsonify([t.to_dict(public=True) for t in content.public_testimonials()])


@bp_public.route("/testimonials", methods=["POST"])
def submit_testimonial():
    """New testimonials wait for admin approval before they are listed."""
    try:
        row = content.create(content.TESTIMONIALS, request.get_json(silent=True), allowed=content.PUBLIC_SUBMIT_KEYS)
    except PayloadError as exc:
        return invalid_payload(content.TESTIMONIALS, exc)
    return jsonify(row.to_dict(public=True)), 201
