"""Map an elapsed-years value to its covering level range."""

from __future__ import annotations

from typing import Iterable, Optional

from .levels import LevelRange, normalize_table


def resolve_level(years: float, table: Iterable[LevelRange]) -> Optional[LevelRange]:
    """Return the active range containing ``years`` (bounds inclusive), or None.

    If several ranges match (only possible for a table that would fail
    validation) the one with the largest ``min_years`` wins.
    """
    match = None
    for level in normalize_table(table):
        if level.min_years > years:
            break
        if level.contains(years):
            match = level
    return match


__all__ = ["resolve_level"]
