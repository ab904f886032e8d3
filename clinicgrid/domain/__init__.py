"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .availability import AvailabilityResolver, day_window, hour_of_day, resolve, working_window
from .conflicts import find_conflicts
from .gesture import GestureInterpreter, GestureMode, RangeSelection, SlotClick
from .grid import Block, TimeGrid
from .intervals import Interval, overlaps, union
from .layout import OverlapLayoutEngine, appointments_for_day, layout
from .models import (
    Appointment,
    CalendarException,
    ExceptionType,
    LayoutAssignment,
    WorkingHours,
    to_time_point,
)

__all__ = [
    "Appointment",
    "AvailabilityResolver",
    "Block",
    "CalendarException",
    "ExceptionType",
    "GestureInterpreter",
    "GestureMode",
    "Interval",
    "LayoutAssignment",
    "OverlapLayoutEngine",
    "RangeSelection",
    "SlotClick",
    "TimeGrid",
    "WorkingHours",
    "appointments_for_day",
    "day_window",
    "find_conflicts",
    "hour_of_day",
    "layout",
    "overlaps",
    "resolve",
    "to_time_point",
    "union",
    "working_window",
]
