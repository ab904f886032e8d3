"""
Application service assembling everything a day column needs to render.

The service fetches exception and appointment snapshots through small
protocols and hands them to the pure domain functions. No result is
cached: every call starts from fresh snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

from ..domain.availability import AvailabilityResolver, DayLike, day_window
from ..domain.conflicts import find_conflicts
from ..domain.grid import Block, TimeGrid
from ..domain.intervals import Interval
from ..domain.layout import OverlapLayoutEngine, appointments_for_day
from ..domain.models import Appointment, CalendarException, LayoutAssignment, WorkingHours


class ExceptionSourceProtocol(Protocol):
    """Read side of the calendar exception collaborator."""

    async def list_exceptions(self, window: Interval) -> List[CalendarException]:
        """Return the exceptions for the visible range, in stored order."""


class AppointmentSourceProtocol(Protocol):
    """Read side of the scheduling data collaborator."""

    async def list_appointments(self, window: Interval) -> List[Appointment]:
        """Return the appointments for the visible range."""


@dataclass(frozen=True)
class DayEntry:
    appointment: Appointment
    assignment: LayoutAssignment
    block: Optional[Block]
    conflict_ids: Tuple[str, ...] = ()


@dataclass
class DayView:
    """Render model for one day column."""
    day: DayLike
    hours: Optional[WorkingHours]
    rows: List[Tuple[int, bool]]
    entries: List[DayEntry] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return self.hours is None or self.hours.is_closed


class ScheduleViewService:
    """
    Orchestrates snapshot retrieval, availability and layout for a day.

    Dependency inversion toward protocols keeps the domain free of any
    storage concerns and lets tests plug in stubs.
    """

    def __init__(
        self,
        exception_source: ExceptionSourceProtocol,
        appointment_source: AppointmentSourceProtocol,
        grid: Optional[TimeGrid] = None,
    ) -> None:
        self._exception_source = exception_source
        self._appointment_source = appointment_source
        self._grid = grid or TimeGrid()
        self._resolver = AvailabilityResolver()
        self._layout_engine = OverlapLayoutEngine()

    async def build_day(
        self,
        day: DayLike,
        base: WorkingHours,
        *,
        show_non_working: bool = False,
    ) -> DayView:
        """Fetch fresh snapshots and compute the render model of ``day``."""
        window = day_window(day)
        exceptions = await self._exception_source.list_exceptions(window)
        appointments = await self._appointment_source.list_appointments(window)

        hours = self._resolver.resolve(day, base, exceptions)
        return self.compose_day(day, hours, appointments, show_non_working=show_non_working)

    def compose_day(
        self,
        day: DayLike,
        hours: Optional[WorkingHours],
        appointments: Sequence[Appointment],
        *,
        show_non_working: bool = False,
    ) -> DayView:
        """Lay out already-fetched appointments under resolved hours."""
        visible = appointments_for_day(appointments, day, hours, show_non_working)
        assignments = self._layout_engine.layout(visible)

        entries = [
            DayEntry(
                appointment=appointment,
                assignment=assignments[appointment.id],
                block=self._grid.block_for(appointment, day, hours, show_non_working),
                conflict_ids=tuple(
                    other.id
                    for other in find_conflicts(appointment.interval, visible, exclude_id=appointment.id)
                ),
            )
            for appointment in visible
        ]

        return DayView(
            day=day,
            hours=hours,
            rows=self._grid.row_states(hours, show_non_working),
            entries=entries,
        )

    @staticmethod
    def check_candidate(
        candidate: Interval,
        existing: Sequence[Appointment],
        exclude_id: Optional[str] = None,
    ) -> List[Appointment]:
        """Live conflict check for an appointment being edited."""
        return find_conflicts(candidate, existing, exclude_id=exclude_id)
