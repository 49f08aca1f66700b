"""Ordered breakpoint tables for threshold-based lookups.

Body-fat and sex dependent limits (deficit caps, surplus bonuses, protein
targets) are expressed as BandTables instead of if/else cascades so that
boundary behavior is data, not control flow.

Example:
    >>> table = BandTable.below([(10, 20.0), (12, 22.0)], default=30.0)
    >>> table.lookup(9.9), table.lookup(10), table.lookup(40)
    (20.0, 22.0, 30.0)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BandMode(Enum):
    """How a value is compared against breakpoints."""

    BELOW = "below"  # x < breakpoint, breakpoints ascending
    ABOVE = "above"  # x > breakpoint, breakpoints descending


@dataclass(frozen=True)
class BandTable:
    """An ordered list of (breakpoint, value) bands with a fallback."""

    bands: tuple[tuple[float, float], ...]
    default: float
    mode: BandMode = BandMode.BELOW

    def __post_init__(self) -> None:
        breakpoints = [bp for bp, _ in self.bands]
        if self.mode == BandMode.BELOW:
            ordered = all(a < b for a, b in zip(breakpoints, breakpoints[1:]))
        else:
            ordered = all(a > b for a, b in zip(breakpoints, breakpoints[1:]))
        if not ordered:
            direction = "ascending" if self.mode == BandMode.BELOW else "descending"
            raise ValueError(f"Band breakpoints must be strictly {direction}: {breakpoints}")

    @classmethod
    def below(cls, bands: list[tuple[float, float]], default: float) -> "BandTable":
        """Build a table where the first band with x < breakpoint wins."""
        return cls(tuple(bands), default, BandMode.BELOW)

    @classmethod
    def above(cls, bands: list[tuple[float, float]], default: float) -> "BandTable":
        """Build a table where the first band with x > breakpoint wins."""
        return cls(tuple(bands), default, BandMode.ABOVE)

    def lookup(self, x: float) -> float:
        for breakpoint, value in self.bands:
            if self.mode == BandMode.BELOW and x < breakpoint:
                return value
            if self.mode == BandMode.ABOVE and x > breakpoint:
                return value
        return self.default
