"""
project: Portfolio API
module: levels.py
License: MIT

Experience level ranges and the table normalization step.

A level table is any ordered sequence of :class:`LevelRange`. Callers are free
to keep it in insertion order; every consumer runs it through
:func:`normalize_table` (drop inactive entries, sort by ``min_years``) before
resolving or estimating so tie-break behaviour cannot drift between functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence


@dataclass(frozen=True)
class LevelRange:
    """A labelled, inclusive ``[min_years, max_years]`` seniority tier.

    ``color`` and ``icon`` are opaque display tokens for the front end and carry
    no meaning for resolution.
    """

    label: str
    min_years: float
    max_years: float
    color: str = "#667eea"
    icon: str = "Briefcase"
    description: str = ""
    active: bool = True

    def contains(self, years: float) -> bool:
        return self.min_years <= years <= self.max_years

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase keys as consumed by the front end)."""
        return {
            "label": self.label,
            "minYears": self.min_years,
            "maxYears": self.max_years,
            "color": self.color,
            "icon": self.icon,
            "description": self.description,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LevelRange":
        """Build a range from an admin payload.

        Accepts camelCase (``minYears``) or snake_case (``min_years``) keys and
        the legacy ``level``/``isActive`` names. Values are not validated here;
        run :func:`portfolio.experience.validation.validate_levels` first.
        """
        label = data.get("label", data.get("level"))
        active = data.get("active", data.get("isActive", True))
        return cls(
            label=str(label or ""),
            min_years=float(_pick(data, "minYears", "min_years")),
            max_years=float(_pick(data, "maxYears", "max_years")),
            color=str(data.get("color") or cls.color),
            icon=str(data.get("icon") or cls.icon),
            description=str(data.get("description") or ""),
            active=bool(active),
        )


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    raise KeyError(keys[0])


LevelTable = Sequence[LevelRange]


def normalize_table(table: Iterable[LevelRange]) -> List[LevelRange]:
    """Return the active entries of ``table`` sorted by ``min_years`` (stable)."""
    return sorted((lvl for lvl in table if lvl.active), key=lambda lvl: lvl.min_years)


def as_dicts(levels: Iterable[LevelRange]) -> List[Dict[str, Any]]:
    return [lvl.to_dict() for lvl in levels]


# Stock tiers used to seed an empty database. Kept as plain data and turned
# into fresh LevelRange lists by default_levels() on every call.
_DEFAULT_LEVEL_ROWS = (
    ("Intern", 0, 0.5, "#94a3b8", "User",
     "Entry-level position with basic understanding of industry practices"),
    ("Junior", 0.6, 2, "#3b82f6", "User",
     "Developing technical skills with guidance from senior team members"),
    ("Mid-Level", 2.1, 5, "#22c55e", "Briefcase",
     "Independent contributor with solid technical expertise and problem-solving skills"),
    ("Senior", 5.1, 10, "#f59e0b", "Briefcase",
     "Experienced professional who mentors others and drives technical decisions"),
    ("Lead", 10.1, 15, "#ef4444", "Shield",
     "Technical leader who shapes architecture and guides team direction"),
    ("Principal", 15.1, 25, "#a855f7", "Crown",
     "Industry expert who influences technology strategy and innovation"),
    ("Architect", 25.1, 999, "#06b6d4", "Building",
     "Visionary leader who designs complex systems and drives organizational change"),
)


def default_levels() -> List[LevelRange]:
    """Return a new list holding the stock seniority tiers (Intern through Architect)."""
    return [
        LevelRange(
            label=label,
            min_years=float(lo),
            max_years=float(hi),
            color=color,
            icon=icon,
            description=desc,
        )
        for label, lo, hi, color, icon, desc in _DEFAULT_LEVEL_ROWS
    ]


__all__ = [
    "LevelRange",
    "LevelTable",
    "normalize_table",
    "as_dicts",
    "default_levels",
]
