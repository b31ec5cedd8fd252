"""Settings lookups with typed fallbacks."""

from __future__ import annotations

import datetime
import logging

from flask import current_app

from portfolio.experience.years import InvalidDateError, parse_date
from portfolio.models import Setting

logger = logging.getLogger(__name__)

EXPERIENCE_START_KEY = "experience_start_date"
FALLBACK_START_DATE = "2019-01-01"


def default_start_date() -> datetime.datetime:
    raw = current_app.config.get("EXPERIENCE_DEFAULT_START_DATE") or FALLBACK_START_DATE
    try:
        return parse_date(raw)
    except InvalidDateError:
        logger.warning("Invalid EXPERIENCE_DEFAULT_START_DATE %r; using %s", raw, FALLBACK_START_DATE)
        return parse_date(FALLBACK_START_DATE)


def experience_start_date() -> datetime.datetime:
    """Configured start of professional experience, or the app default."""
    raw = Setting.get(EXPERIENCE_START_KEY)
    if not raw:
        return default_start_date()
    try:
        return parse_date(raw)
    except InvalidDateError:
        logger.warning("Stored %s=%r is not a date; falling back to default", EXPERIENCE_START_KEY, raw)
        return default_start_date()


def set_experience_start_date(value) -> datetime.datetime:
    """Validate and persist a new start date. Raises InvalidDateError."""
    parsed = parse_date(value)
    Setting.set(
        EXPERIENCE_START_KEY,
        parsed.date().isoformat(),
        "string",
        "Start of professional experience",
    )
    return parsed


def current_clock():
    return current_app.config["CLOCK"]
