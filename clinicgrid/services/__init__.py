"""
Service layer helpers that orchestrate collaborators and domain logic.
"""

from .exception_store import InMemoryExceptionStore
from .schedule_view import (
    AppointmentSourceProtocol,
    DayEntry,
    DayView,
    ExceptionSourceProtocol,
    ScheduleViewService,
)

__all__ = [
    "AppointmentSourceProtocol",
    "DayEntry",
    "DayView",
    "ExceptionSourceProtocol",
    "InMemoryExceptionStore",
    "ScheduleViewService",
]
