"""Progress toward the next level and the fused experience snapshot."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from .levels import LevelRange, normalize_table
from .resolver import resolve_level
from .years import Clock, DateLike, compute_years, round_tenths


@dataclass(frozen=True)
class Progression:
    years: float
    current_level: Optional[LevelRange] = None
    next_level: Optional[LevelRange] = None
    progress_percent: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "years": self.years,
            "currentLevel": self.current_level.to_dict() if self.current_level else None,
            "nextLevel": self.next_level.to_dict() if self.next_level else None,
            "progress": self.progress_percent,
        }


def _percent(value: float) -> int:
    # Half-up rounding then clamp into 0..100.
    return max(0, min(100, int(math.floor(value + 0.5))))


def estimate_progression(
    years: float,
    table: Iterable[LevelRange],
    current: Optional[LevelRange] = None,
) -> Progression:
    """Compute progress from the current level's lower bound to the next one's.

    ``current`` may be passed when the caller already resolved the level.
    """
    ordered = normalize_table(table)
    if current is None:
        current = resolve_level(years, ordered)
    if current is None:
        return Progression(years=years)

    try:
        index = ordered.index(current)
    except ValueError:
        # Pre-resolved level not part of this table.
        return Progression(years=years)

    if index == len(ordered) - 1:
        return Progression(years=years, current_level=current, progress_percent=100)

    nxt = ordered[index + 1]
    span = nxt.min_years - current.min_years
    if span == 0:
        percent = 100
    else:
        percent = _percent(((years - current.min_years) / span) * 100)
    return Progression(years=years, current_level=current, next_level=nxt, progress_percent=percent)


def next_level_info(progression: Progression) -> Optional[Dict[str, Any]]:
    """Summary of the upcoming tier: label, threshold and years still to go."""
    nxt = progression.next_level
    if nxt is None:
        return None
    remaining = max(0.0, round_tenths(nxt.min_years - progression.years))
    return {"label": nxt.label, "yearsNeeded": nxt.min_years, "yearsRemaining": remaining}


@dataclass(frozen=True)
class ExperienceSnapshot:
    """Derived view of experience at one instant. Never persisted."""

    years: float
    resolved_level: Optional[LevelRange]
    progression: Progression

    def to_dict(self) -> Dict[str, Any]:
        return {
            "years": self.years,
            "level": self.resolved_level.to_dict() if self.resolved_level else None,
            "progress": self.progression.progress_percent,
            "nextLevel": next_level_info(self.progression),
        }


def take_snapshot(
    start_date: DateLike,
    table: Iterable[LevelRange],
    reference_date: Optional[DateLike] = None,
    clock: Optional[Clock] = None,
) -> ExperienceSnapshot:
    ordered = normalize_table(table)
    years = compute_years(start_date, reference_date, clock=clock)
    level = resolve_level(years, ordered)
    progression = estimate_progression(years, ordered, current=level)
    return ExperienceSnapshot(years=years, resolved_level=level, progression=progression)


__all__ = [
    "Progression",
    "estimate_progression",
    "next_level_info",
    "ExperienceSnapshot",
    "take_snapshot",
]
