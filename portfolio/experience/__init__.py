"""Experience level classification and progression.

Pure functions over in-memory level tables; no Flask or database imports.
"""

from .engine import ExperienceEngine  # noqa: F401
from .levels import LevelRange, default_levels, normalize_table  # noqa: F401
from .progression import (  # noqa: F401
    ExperienceSnapshot,
    Progression,
    estimate_progression,
    next_level_info,
    take_snapshot,
)
from .resolver import resolve_level  # noqa: F401
from .timeline import TimelineEntry, build_timeline  # noqa: F401
from .validation import ValidationError, ValidationResult, ensure_valid, validate_levels  # noqa: F401
from .years import InvalidDateError, compute_years, parse_date, utc_now  # noqa: F401

__all__ = [
    "ExperienceEngine",
    "LevelRange",
    "default_levels",
    "normalize_table",
    "ExperienceSnapshot",
    "Progression",
    "estimate_progression",
    "next_level_info",
    "take_snapshot",
    "resolve_level",
    "TimelineEntry",
    "build_timeline",
    "ValidationError",
    "ValidationResult",
    "ensure_valid",
    "validate_levels",
    "InvalidDateError",
    "compute_years",
    "parse_date",
    "utc_now",
]
