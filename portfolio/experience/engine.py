"""Configured facade over the experience functions.

The engine is built with an explicit table, start date and clock, so request
handlers and tests never rely on module-level state.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .levels import LevelRange, normalize_table
from .progression import ExperienceSnapshot, Progression, estimate_progression, take_snapshot
from .resolver import resolve_level
from .timeline import TimelineEntry, build_timeline
from .years import Clock, DateLike, compute_years, parse_date, utc_now


class ExperienceEngine:
    def __init__(self, table: Iterable[LevelRange], start_date: DateLike, clock: Optional[Clock] = None):
        self.table: List[LevelRange] = normalize_table(table)
        self.start_date = parse_date(start_date)
        self.clock: Clock = clock or utc_now

    def years(self) -> float:
        return compute_years(self.start_date, clock=self.clock)

    def level_for(self, years: float) -> Optional[LevelRange]:
        return resolve_level(years, self.table)

    def level(self) -> Optional[LevelRange]:
        return self.level_for(self.years())

    def progression(self, years: Optional[float] = None) -> Progression:
        return estimate_progression(self.years() if years is None else years, self.table)

    def snapshot(self) -> ExperienceSnapshot:
        return take_snapshot(self.start_date, self.table, clock=self.clock)

    def timeline(self) -> List[TimelineEntry]:
        return build_timeline(self.start_date, self.table, clock=self.clock)

    def __repr__(self):
        return f"<ExperienceEngine levels={len(self.table)} start={self.start_date.date().isoformat()}>"


__all__ = ["ExperienceEngine"]
