"""Structural validation for a candidate level table.

Validation is exhaustive: every candidate is checked and every problem is
reported so the admin UI can display them all at once. Nothing is mutated or
persisted here; callers must only write the table when ``result.ok`` is true.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, Iterable, List, Mapping, Union

from .levels import LevelRange

Candidate = Union[LevelRange, Mapping[str, Any]]


@dataclass
class ValidationResult:
    ok: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "errors": list(self.errors)}


class ValidationError(Exception):
    """A candidate table failed validation; ``errors`` holds every message."""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid level configuration")


def _as_fields(candidate: Candidate) -> Dict[str, Any]:
    if isinstance(candidate, LevelRange):
        return candidate.to_dict()
    if isinstance(candidate, Mapping):
        data = dict(candidate)
        # Accept snake_case and the legacy 'level' key.
        data.setdefault("label", data.get("level"))
        data.setdefault("minYears", data.get("min_years"))
        data.setdefault("maxYears", data.get("max_years"))
        data.setdefault("active", data.get("isActive", True))
        return data
    return {}


def _is_number(value: Any) -> bool:
    """Finite real, booleans excluded."""
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_levels(candidates: Any) -> ValidationResult:
    """Check required fields, numeric bounds, duplicate labels and overlaps."""
    if not isinstance(candidates, (list, tuple)) or not candidates:
        return ValidationResult(False, ["Experience levels must be a non-empty list"])

    errors: List[str] = []
    rows = []
    seen: Dict[str, int] = {}
    for index, candidate in enumerate(candidates, start=1):
        data = _as_fields(candidate)
        if not data:
            errors.append(f"Level {index} must be an object")
            continue
        for name in ("label", "color", "description"):
            if _is_blank(data.get(name)):
                errors.append(f"Level {index} is missing required field: {name}")

        label = data.get("label")
        if label is not None and not isinstance(label, str):
            errors.append(f"Level {index} has a non-string label")
        elif isinstance(label, str) and label.strip():
            if label in seen:
                errors.append(f"Level {index} duplicates label '{label}' (first used by level {seen[label]})")
            else:
                seen[label] = index

        if not isinstance(data.get("active"), bool):
            errors.append(f"Level {index} has a non-boolean value for active")

        lo, hi = data.get("minYears"), data.get("maxYears")
        if not (_is_number(lo) and _is_number(hi)):
            errors.append(f"Level {index} has invalid numeric values for minYears or maxYears")
            continue
        if lo < 0 or hi < 0:
            errors.append(f"Level {index} has negative values for minYears or maxYears")
        elif lo > hi:
            errors.append(f"Level {index} has minYears greater than maxYears")
        rows.append((label if isinstance(label, str) else str(label), lo, hi))

    # Overlap pass over numerically valid rows; equality at a shared boundary counts.
    rows.sort(key=lambda r: r[1])
    for prev, nxt in zip(rows, rows[1:]):
        if prev[2] >= nxt[1]:
            errors.append(
                f"Overlapping ranges: {prev[0]} ({prev[1]}-{prev[2]}) overlaps with {nxt[0]} ({nxt[1]}-{nxt[2]})"
            )

    return ValidationResult(not errors, errors)


def ensure_valid(candidates: Any) -> ValidationResult:
    """Validate and raise :class:`ValidationError` when the table is unsound."""
    result = validate_levels(candidates)
    if not result.ok:
        raise ValidationError(result.errors)
    return result


__all__ = ["ValidationResult", "ValidationError", "validate_levels", "ensure_valid"]
