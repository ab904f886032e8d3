"""
Domain models for calendar exceptions, appointments and layout results.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

import pendulum
from pendulum import DateTime

from .intervals import Interval

TimeLike = Union[DateTime, datetime, str]


def to_time_point(value: TimeLike) -> DateTime:
    """
    Normalize a datetime or ISO-8601 string to a timezone-aware DateTime.

    Naive values are interpreted as UTC.
    """
    if isinstance(value, DateTime):
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value, tz="UTC")
    parsed = pendulum.parse(value, tz="UTC")
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Expected a date and time, got {value!r}")
    return parsed


@dataclass(frozen=True)
class WorkingHours:
    """
    Open hours for one day as fractional hours since midnight.

    ``start >= end`` means the day is closed.
    """
    start: float
    end: float

    @property
    def is_closed(self) -> bool:
        return self.start >= self.end

    def contains_hour(self, hour: float) -> bool:
        """Check if an hour row falls inside the open window."""
        return self.start <= hour < self.end


class ExceptionType(str, Enum):
    BLACKOUT = "BLACKOUT"
    EXTRA_OPEN = "EXTRA_OPEN"
    DAY_ADJUST = "DAY_ADJUST"


@dataclass(frozen=True)
class CalendarException:
    """
    An override of the base working hours for a date range.

    Exceptions are immutable; an update replaces the whole record by id.
    """
    id: str
    type: ExceptionType
    date_start: DateTime
    date_end: DateTime
    created_at: DateTime
    location_id: Optional[str] = None
    recurrence: Optional[str] = None  # stored only, never expanded
    reason: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def interval(self) -> Interval:
        return Interval(start=self.date_start, end=self.date_end)


@dataclass(frozen=True)
class Appointment:
    """
    A read-only snapshot of a scheduled appointment.

    Identity is ``id``; everything else belongs to the scheduling
    application and may differ between snapshots.
    """
    id: str
    start: DateTime
    end: DateTime
    patient_id: str
    location_id: str
    title: str = ""
    patient_name: str = ""
    recurrence_type: str = "none"

    @property
    def interval(self) -> Interval:
        return Interval(start=self.start, end=self.end)


@dataclass(frozen=True)
class LayoutAssignment:
    """Column placement of one appointment inside its overlap group."""
    column: int
    total_columns: int

    @property
    def collides(self) -> bool:
        """A group needing more than one column has a scheduling collision."""
        return self.total_columns > 1
