"""
Half-open interval primitives shared by the scheduling core.

All intervals are ``[start, end)``: an interval that ends exactly where
another one starts does not overlap it.
"""

from __future__ import annotations

from dataclasses import dataclass

from pendulum import DateTime


@dataclass(frozen=True)
class Interval:
    """
    An immutable half-open time interval.

    Unlike a strict range type this never raises: ``end <= start`` is a
    legal value that is simply empty and overlaps nothing.
    """
    start: DateTime
    end: DateTime

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def duration_minutes(self) -> int:
        """Return the duration in minutes (0 for an empty interval)."""
        if self.is_empty:
            return 0
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self, other)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


def overlaps(a: Interval, b: Interval) -> bool:
    """
    Check whether two intervals share at least one instant.

    Touching intervals (``a.end == b.start``) do not overlap, and an
    empty interval overlaps nothing, not even itself.
    """
    if a.is_empty or b.is_empty:
        return False
    return max(a.start, b.start) < min(a.end, b.end)


def union(a: Interval, b: Interval) -> Interval:
    """
    Return the smallest interval covering both inputs.

    Only meaningful when the two intervals overlap or touch; the caller
    is responsible for checking that first.
    """
    return Interval(start=min(a.start, b.start), end=max(a.end, b.end))
