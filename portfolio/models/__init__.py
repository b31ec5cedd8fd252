# Model package init
from .models import (  # noqa: F401 re-export
    AnalyticsEvent,
    ContactMessage,
    ExperienceLevel,
    HireRequest,
    Project,
    Setting,
    Testimonial,
    User,
)

__all__ = [
    "AnalyticsEvent",
    "ContactMessage",
    "ExperienceLevel",
    "HireRequest",
    "Project",
    "Setting",
    "Testimonial",
    "User",
]
