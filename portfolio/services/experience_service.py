"""Experience level persistence and request-level orchestration.

Loads the level table from the database, applies validated bulk replacements
(upsert keyed by label) and builds the engine used by the HTTP layer.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from portfolio import db
from portfolio.experience import ExperienceEngine, LevelRange, default_levels, ensure_valid
from portfolio.logging_utils import get_logger
from portfolio.models import ExperienceLevel
from portfolio.services import analytics_service
from portfolio.services.settings_service import current_clock, experience_start_date

logger = logging.getLogger(__name__)
events_log = get_logger("portfolio.experience")


def load_table(include_inactive: bool = False) -> List[LevelRange]:
    """Return stored levels as LevelRange values ordered by min_years."""
    query = ExperienceLevel.query
    if not include_inactive:
        query = query.filter_by(active=True)
    return [row.to_range() for row in query.order_by(ExperienceLevel.min_years.asc()).all()]


def replace_table(candidates: Any, actor: Optional[str] = None) -> int:
    """Validate ``candidates`` and upsert them by label in a single commit.

    Raises ValidationError with every problem when the set is unsound; nothing
    is written in that case. Stored labels absent from ``candidates`` are left
    untouched. Returns the number of levels written.
    """
    ensure_valid(candidates)
    levels = [c if isinstance(c, LevelRange) else LevelRange.from_dict(c) for c in candidates]
    existing = {row.label: row for row in ExperienceLevel.query.all()}
    created = 0
    try:
        for level in levels:
            row = existing.get(level.label)
            if row is None:
                row = ExperienceLevel()
                db.session.add(row)
                created += 1
            row.apply(level)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Experience level replacement failed")
        raise
    events_log.info(event="levels_replaced", count=len(levels), created=created, actor=actor or "system")
    analytics_service.track(
        "admin",
        "experience_config_update",
        updatedLevels=len(levels),
        updatedBy=actor or "system",
    )
    return len(levels)


def seed_default_levels(reset: bool = False) -> int:
    """Insert the stock tiers when the table is empty (or after clearing it).

    Returns the number of rows inserted.
    """
    if reset:
        ExperienceLevel.query.delete()
        db.session.commit()
    elif ExperienceLevel.query.first() is not None:
        return 0
    levels = default_levels()
    ensure_valid(levels)
    for level in levels:
        row = ExperienceLevel()
        row.apply(level)
        db.session.add(row)
    db.session.commit()
    logger.info("Seeded %d default experience levels", len(levels))
    return len(levels)


def build_engine(table: Optional[Iterable[LevelRange]] = None) -> ExperienceEngine:
    """Engine configured from the stored table, start date setting and app clock."""
    return ExperienceEngine(
        load_table() if table is None else table,
        experience_start_date(),
        clock=current_clock(),
    )


def current_experience() -> dict:
    """Snapshot payload for the public 'current experience' view (tracked)."""
    engine = build_engine()
    snapshot = engine.snapshot()
    payload = snapshot.to_dict()
    payload["startDate"] = engine.start_date.date().isoformat()
    level = snapshot.resolved_level
    analytics_service.track(
        "experience",
        "experience_view",
        years=snapshot.years,
        level=level.label if level else "Unknown",
    )
    return payload
