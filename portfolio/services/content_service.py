"""Content management for projects, inbound messages and testimonials.

Each resource declares its writable wire fields once. Create and update share
one payload check, so the public forms and the admin editors reject bad input
the same way:
  1. Unknown keys are ignored.
  2. Every problem is collected; nothing is written when any is found.
  3. Writes commit in one transaction and roll back on database errors.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from portfolio import db
from portfolio.logging_utils import get_logger
from portfolio.models import AnalyticsEvent, ContactMessage, HireRequest, Project, Testimonial

logger = logging.getLogger(__name__)
events_log = get_logger("portfolio.content")

RECENT_PROJECTS = 5
TRAFFIC_LIMIT = 100
GEO_LIMIT = 10


class Field(NamedTuple):
    key: str  # camelCase wire name
    attr: str  # model attribute
    kind: str  # 'text' | 'bool' | 'text_list' | 'status'
    required: bool = False


class Resource(NamedTuple):
    name: str
    model: Any
    fields: Tuple[Field, ...]


class PayloadError(Exception):
    """A create/update payload failed validation; ``errors`` lists every problem."""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


PROJECTS = Resource(
    "Project",
    Project,
    (
        Field("title", "title", "text", True),
        Field("description", "description", "text", True),
        Field("image", "image", "text", True),
        Field("technologies", "technologies", "text_list", True),
        Field("githubUrl", "github_url", "text"),
        Field("liveUrl", "live_url", "text"),
    ),
)

CONTACTS = Resource(
    "Contact",
    ContactMessage,
    (
        Field("name", "name", "text", True),
        Field("email", "email", "text", True),
        Field("message", "message", "text", True),
        Field("status", "status", "status"),
        Field("reply", "reply", "text"),
    ),
)

HIRE_REQUESTS = Resource(
    "Hire request",
    HireRequest,
    (
        Field("name", "name", "text", True),
        Field("email", "email", "text", True),
        Field("message", "message", "text", True),
        Field("budget", "budget", "text", True),
        Field("timeline", "timeline", "text", True),
        Field("status", "status", "status"),
        Field("response", "response", "text"),
    ),
)

TESTIMONIALS = Resource(
    "Testimonial",
    Testimonial,
    (
        Field("name", "name", "text", True),
        Field("email", "email", "text", True),
        Field("message", "message", "text", True),
        Field("approved", "approved", "bool"),
        Field("featured", "featured", "bool"),
    ),
)

# Keys a visitor may set through the public forms.
PUBLIC_SUBMIT_KEYS = ("name", "email", "message", "budget", "timeline")


def _check_value(resource: Resource, field: Field, value: Any) -> Optional[str]:
    if field.kind == "bool":
        if not isinstance(value, bool):
            return f"{field.key} must be a boolean"
    elif field.kind == "text_list":
        if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
            return f"{field.key} must be a list of strings"
        if field.required and not value:
            return f"{field.key} must not be empty"
    elif field.kind == "status":
        if value not in resource.model.STATUSES:
            return f"{field.key} must be one of: {', '.join(resource.model.STATUSES)}"
    elif value is not None and not isinstance(value, str):
        return f"{field.key} must be a string"
    elif field.required and not (value or "").strip():
        return f"Missing required field: {field.key}"
    return None


def clean_payload(
    resource: Resource,
    payload: Any,
    partial: bool = False,
    allowed: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Return ``{attr: value}`` for the accepted keys of ``payload``.

    ``partial`` skips the required check for keys that are absent (updates).
    ``allowed`` narrows the writable keys (public submissions).
    Raises PayloadError listing every problem.
    """
    if not isinstance(payload, Mapping):
        raise PayloadError([f"{resource.name} payload must be an object"])
    keys = set(allowed) if allowed is not None else None
    errors: List[str] = []
    values: Dict[str, Any] = {}
    for field in resource.fields:
        if keys is not None and field.key not in keys:
            continue
        if field.key not in payload:
            if field.required and not partial:
                errors.append(f"Missing required field: {field.key}")
            continue
        value = payload[field.key]
        problem = _check_value(resource, field, value)
        if problem:
            errors.append(problem)
            continue
        values[field.attr] = value.strip() if isinstance(value, str) else value
    if errors:
        raise PayloadError(errors)
    return values


def _commit(action: str, resource: Resource) -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("%s %s failed", resource.name, action)
        raise


def get(resource: Resource, item_id: int):
    return db.session.get(resource.model, item_id)


def list_items(resource: Resource, newest_first: bool = True) -> list:
    model = resource.model
    query = model.query
    if newest_first:
        query = query.order_by(model.created_at.desc(), model.id.desc())
    else:
        query = query.order_by(model.id.asc())
    return query.all()


def create(resource: Resource, payload: Any, allowed: Optional[Iterable[str]] = None):
    row = resource.model(**clean_payload(resource, payload, allowed=allowed))
    db.session.add(row)
    _commit("create", resource)
    events_log.info(event="content_created", resource=resource.name, id=row.id)
    return row


def update(resource: Resource, item_id: int, payload: Any):
    """Apply a partial update. Returns None when the row does not exist."""
    row = get(resource, item_id)
    if row is None:
        return None
    for attr, value in clean_payload(resource, payload, partial=True).items():
        setattr(row, attr, value)
    _commit("update", resource)
    return row


def delete(resource: Resource, item_id: int) -> bool:
    row = get(resource, item_id)
    if row is None:
        return False
    db.session.delete(row)
    _commit("delete", resource)
    events_log.info(event="content_deleted", resource=resource.name, id=item_id)
    return True


def record_project_view(project_id: int) -> Optional[Project]:
    """Increment the view counter in SQL so concurrent pings are not lost."""
    project = get(PROJECTS, project_id)
    if project is None:
        return None
    Project.query.filter_by(id=project_id).update({Project.views: Project.views + 1})
    _commit("view", PROJECTS)
    db.session.refresh(project)
    return project


def _answer(resource: Resource, item_id: int, text_attr: str, text: Any):
    if not isinstance(text, str) or not text.strip():
        raise PayloadError(["Reply message is required"])
    row = get(resource, item_id)
    if row is None:
        return None
    row.status = "responded"
    setattr(row, text_attr, text.strip())
    _commit("reply", resource)
    events_log.info(event="content_answered", resource=resource.name, id=item_id)
    return row


def reply_to_contact(contact_id: int, message: Any) -> Optional[ContactMessage]:
    return _answer(CONTACTS, contact_id, "reply", message)


def respond_to_hire_request(request_id: int, message: Any) -> Optional[HireRequest]:
    return _answer(HIRE_REQUESTS, request_id, "response", message)


def approve_testimonial(testimonial_id: int) -> Optional[Testimonial]:
    row = get(TESTIMONIALS, testimonial_id)
    if row is None:
        return None
    row.approved = True
    _commit("approve", TESTIMONIALS)
    return row


def toggle_testimonial_featured(testimonial_id: int) -> Optional[Testimonial]:
    row = get(TESTIMONIALS, testimonial_id)
    if row is None:
        return None
    row.featured = not row.featured
    _commit("feature", TESTIMONIALS)
    return row


def public_testimonials() -> List[Testimonial]:
    """Approved testimonials, featured first, then newest."""
    return (
        Testimonial.query.filter_by(approved=True)
        .order_by(Testimonial.featured.desc(), Testimonial.created_at.desc(), Testimonial.id.desc())
        .all()
    )


# ----------------------------- Dashboard -----------------------------------


def dashboard_stats() -> Dict[str, Any]:
    """Headline numbers for the admin landing page."""
    recent = Project.query.order_by(Project.created_at.desc(), Project.id.desc()).limit(RECENT_PROJECTS).all()
    return {
        "totalProjects": Project.query.count(),
        "totalViews": int(db.session.query(func.coalesce(func.sum(Project.views), 0)).scalar()),
        "recentProjects": [p.to_dict() for p in recent],
        "pendingContacts": ContactMessage.query.filter_by(status="pending").count(),
        "pendingHireRequests": HireRequest.query.filter_by(status="pending").count(),
        "pendingTestimonials": Testimonial.query.filter_by(approved=False).count(),
    }


def projects_by_views() -> List[Project]:
    return Project.query.order_by(Project.views.desc(), Project.id.asc()).all()


def traffic_events(limit: int = TRAFFIC_LIMIT) -> List[AnalyticsEvent]:
    """Most recent page_view events."""
    return (
        AnalyticsEvent.query.filter_by(event="page_view")
        .order_by(AnalyticsEvent.created_at.desc(), AnalyticsEvent.id.desc())
        .limit(limit)
        .all()
    )


def geo_breakdown(limit: int = GEO_LIMIT) -> List[Dict[str, Any]]:
    """Event counts grouped by ``data.location`` (missing locations count as None)."""
    counts = Counter((e.data or {}).get("location") for e in AnalyticsEvent.query.all())
    return [{"location": loc, "count": n} for loc, n in counts.most_common(limit)]


def daily_event_counts() -> List[Dict[str, Any]]:
    """Number of analytics events per calendar day, oldest first."""
    counts = Counter(e.created_at.date() for e in AnalyticsEvent.query.all() if e.created_at)
    return [{"date": day.isoformat(), "count": counts[day]} for day in sorted(counts)]
