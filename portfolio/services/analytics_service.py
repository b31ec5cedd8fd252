"""Analytics capture.

Writes one `AnalyticsEvent` row per tracked event. Tracking is best-effort:
a failed write is logged and rolled back so the request that triggered it
still succeeds.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from portfolio import db
from portfolio.logging_utils import get_logger
from portfolio.models import AnalyticsEvent

logger = logging.getLogger(__name__)
events_log = get_logger("portfolio.analytics")

MAX_RECENT = 200


def track(page: str, event: str, **data) -> bool:
    """Record an analytics event. Returns True when the row was committed."""
    row = AnalyticsEvent(page=page, event=event, data=data)
    try:
        db.session.add(row)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to record analytics event %s/%s", page, event)
        events_log.warn(event="analytics_write_failed", page=page, name=event)
        return False
    return True


def recent_events(limit: int = 50) -> List[AnalyticsEvent]:
    limit = max(1, min(int(limit), MAX_RECENT))
    return AnalyticsEvent.query.order_by(AnalyticsEvent.created_at.desc(), AnalyticsEvent.id.desc()).limit(limit).all()
