"""Elapsed-years calculation.

Converts a start date (and optional reference date) into fractional years using
an average 365.25-day year, rounded half-up to one decimal place. A start date
after the reference clamps to ``0``.
"""

from __future__ import annotations

import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional, Union

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60

DateLike = Union[datetime.datetime, datetime.date, str]
Clock = Callable[[], datetime.datetime]


class InvalidDateError(ValueError):
    """Raised when a value cannot be interpreted as a date."""


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def parse_date(value: DateLike) -> datetime.datetime:
    """Coerce ``value`` into a timezone-aware UTC datetime.

    Accepts ``datetime`` (naive values are taken as UTC), ``date`` (midnight
    UTC) and ISO-8601 strings, including a trailing ``Z``.
    """
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, datetime.date):
        dt = datetime.datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise InvalidDateError("empty date string")
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.datetime.fromisoformat(raw)
        except ValueError as exc:
            raise InvalidDateError(f"unparseable date: {value!r}") from exc
    else:
        raise InvalidDateError(f"unsupported date value: {value!r}")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def round_tenths(value: float) -> float:
    """Round half-up at the tenths digit (2.25 -> 2.3, never banker's rounding)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_years(
    start_date: DateLike,
    reference_date: Optional[DateLike] = None,
    clock: Optional[Clock] = None,
) -> float:
    """Return elapsed years between ``start_date`` and ``reference_date``.

    ``reference_date`` defaults to ``clock()`` (``utc_now`` when no clock is
    given). A start in the future relative to the reference yields ``0.0``.
    """
    start = parse_date(start_date)
    if reference_date is None:
        reference = parse_date((clock or utc_now)())
    else:
        reference = parse_date(reference_date)
    if start > reference:
        return 0.0
    elapsed = (reference - start).total_seconds()
    return round_tenths(elapsed / SECONDS_PER_YEAR)


__all__ = [
    "DAYS_PER_YEAR",
    "InvalidDateError",
    "utc_now",
    "parse_date",
    "round_tenths",
    "compute_years",
]
