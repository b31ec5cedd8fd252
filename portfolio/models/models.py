"""
project: Portfolio API
module: models.py
License: MIT

Database models used by the portfolio API.

Notes:
- Passwords are stored as hashed values (Werkzeug generate_password_hash).
- Settings are stored as text with a type hint column; consumers parse values.
- Experience level rows are the persisted form of the engine's LevelRange.
"""

import datetime

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from portfolio import db
from portfolio.experience.levels import LevelRange


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class User(UserMixin, db.Model):
    """Dashboard account.

    Attributes:
        id: Primary key.
        username: Unique handle for login.
        password: Hashed password string (never store plaintext).
        role: 'admin' | 'user'. Only admins may edit content.
    """

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="user")
    last_login = db.Column(db.DateTime, nullable=True)

    def set_password(self, raw_password: str):
        """Hash and store a new password value."""
        self.password = generate_password_hash(raw_password)

    def check_password(self, candidate: str) -> bool:
        return check_password_hash(self.password or "", candidate)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }


class Setting(db.Model):
    """Key/value site settings.

    Stores tunable values (experience start date, home image path, etc.) so
    they can be adjusted from the dashboard without code changes.

    Example rows:
        key='experience_start_date', value='2019-01-01', type='string'
    """

    SETTING_TYPES = ("string", "number", "boolean", "object")

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(80), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(20), nullable=False, default="string")
    description = db.Column(db.String(255), nullable=False, default="")
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    @staticmethod
    def get(key: str):
        row = Setting.query.filter_by(key=key).first()
        return row.value if row else None

    @staticmethod
    def set(key: str, value: str, type: str = "string", description: str = ""):
        row = Setting.query.filter_by(key=key).first()
        if not row:
            row = Setting(key=key, value=value)
            db.session.add(row)
        row.value = value
        row.type = type or "string"
        if description:
            row.description = description
        db.session.commit()
        return row

    def to_dict(self):
        return {
            "key": self.key,
            "value": self.value,
            "type": self.type,
            "description": self.description,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class ExperienceLevel(db.Model):
    """Persisted seniority tier.

    Attributes:
        label: Unique tier name (upsert key for bulk replacement).
        min_years / max_years: Inclusive bounds in fractional years.
        color / icon: Display tokens for the front end.
        active: Inactive rows are kept but excluded from listing and resolution.
    """

    __tablename__ = "experience_level"

    id = db.Column(db.Integer, primary_key=True)
    label = db.Column(db.String(80), unique=True, nullable=False)
    min_years = db.Column(db.Float, nullable=False, index=True)
    max_years = db.Column(db.Float, nullable=False)
    color = db.Column(db.String(40), nullable=False, default="#667eea")
    icon = db.Column(db.String(40), nullable=False, default="Briefcase")
    description = db.Column(db.Text, nullable=False)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_range(self) -> LevelRange:
        return LevelRange(
            label=self.label,
            min_years=float(self.min_years),
            max_years=float(self.max_years),
            color=self.color,
            icon=self.icon,
            description=self.description,
            active=bool(self.active),
        )

    def apply(self, level: LevelRange):
        """Copy every field of ``level`` onto this row (label included)."""
        self.label = level.label
        self.min_years = level.min_years
        self.max_years = level.max_years
        self.color = level.color
        self.icon = level.icon
        self.description = level.description
        self.active = level.active

    def __repr__(self):
        return f"<ExperienceLevel {self.label} {self.min_years}-{self.max_years}>"


class AnalyticsEvent(db.Model):
    """Captured page/event record (e.g. page='experience', event='experience_view')."""

    __tablename__ = "analytics_event"

    id = db.Column(db.Integer, primary_key=True)
    page = db.Column(db.String(80), nullable=False)
    event = db.Column(db.String(80), nullable=False)
    data = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=_utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "page": self.page,
            "event": self.event,
            "data": self.data or {},
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


def _iso(value):
    return value.isoformat() if value else None


class Project(db.Model):
    """Portfolio project card.

    Attributes:
        technologies: JSON list of technology names shown as tags.
        image: Path or URL of the cover image (uploads are handled elsewhere).
        views: Incremented by the public view ping.
    """

    __tablename__ = "project"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    image = db.Column(db.String(500), nullable=False)
    technologies = db.Column(db.JSON, nullable=False, default=list)
    github_url = db.Column(db.String(500), nullable=True)
    live_url = db.Column(db.String(500), nullable=True)
    views = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=_utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "technologies": list(self.technologies or []),
            "githubUrl": self.github_url,
            "liveUrl": self.live_url,
            "views": self.views or 0,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class ContactMessage(db.Model):
    """Message left through the public contact form."""

    __tablename__ = "contact_message"

    STATUSES = ("pending", "responded")

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")
    reply = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "status": self.status,
            "reply": self.reply,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class HireRequest(db.Model):
    """Engagement request from the "hire me" form (budget and timeline are free text)."""

    __tablename__ = "hire_request"

    STATUSES = ("pending", "responded")

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    budget = db.Column(db.String(120), nullable=False)
    timeline = db.Column(db.String(120), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")
    response = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "budget": self.budget,
            "timeline": self.timeline,
            "status": self.status,
            "response": self.response,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Testimonial(db.Model):
    """Client testimonial. Only approved rows are shown publicly."""

    __tablename__ = "testimonial"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    approved = db.Column(db.Boolean, nullable=False, default=False)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=_utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self, public: bool = False):
        data = {
            "id": self.id,
            "name": self.name,
            "message": self.message,
            "featured": bool(self.featured),
            "createdAt": _iso(self.created_at),
        }
        if not public:
            data.update(email=self.email, approved=bool(self.approved), updatedAt=_iso(self.updated_at))
        return data
