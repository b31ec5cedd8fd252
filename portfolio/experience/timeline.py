"""Year-by-year experience timeline."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .levels import LevelRange, normalize_table
from .resolver import resolve_level
from .years import Clock, DateLike, compute_years, parse_date, utc_now


@dataclass(frozen=True)
class TimelineEntry:
    year: int
    years: float
    level: Optional[LevelRange]

    @property
    def date(self) -> datetime.datetime:
        return datetime.datetime(self.year, 1, 1, tzinfo=datetime.timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "years": self.years,
            "level": self.level.to_dict() if self.level else None,
            "date": self.date.isoformat(),
        }


def build_timeline(
    start_date: DateLike,
    table: Iterable[LevelRange],
    clock: Optional[Clock] = None,
) -> List[TimelineEntry]:
    """One entry per calendar year from the start year through the current year.

    Each entry's ``years`` is measured at January 1 (UTC) of that year, so the
    first entry of a mid-year start reads ``0``.
    """
    start = parse_date(start_date)
    current_year = parse_date((clock or utc_now)()).year
    ordered = normalize_table(table)
    entries = []
    for year in range(start.year, current_year + 1):
        checkpoint = datetime.datetime(year, 1, 1, tzinfo=datetime.timezone.utc)
        years = compute_years(start, checkpoint)
        entries.append(TimelineEntry(year=year, years=years, level=resolve_level(years, ordered)))
    return entries


__all__ = ["TimelineEntry", "build_timeline"]
