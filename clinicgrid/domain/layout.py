"""
Side-by-side layout of overlapping appointments within one day.

Pure domain logic: the engine keeps no state between calls and returns
a fresh mapping every time.
"""

from typing import Dict, Iterable, List, Optional

from pendulum import DateTime

from .availability import DayLike, day_window, working_window
from .intervals import overlaps
from .models import Appointment, LayoutAssignment, WorkingHours


class OverlapLayoutEngine:
    """
    Assigns each appointment a column inside its overlap group.

    Algorithm:
    1. Stable-sort appointments by start time
    2. Split them into groups of transitively overlapping appointments
    3. Inside each group, greedily place every appointment into the first
       column whose last appointment has already ended
    4. Every member of a group shares the group's column count
    """

    def layout(self, appointments: Iterable[Appointment]) -> Dict[str, LayoutAssignment]:
        """
        Compute column placements for appointments of a single day.

        Returns:
            Dict mapping appointment id to its LayoutAssignment
        """
        ordered = sorted(appointments, key=lambda a: a.start)

        assignments: Dict[str, LayoutAssignment] = {}
        for group in self._group_overlaps(ordered):
            assignments.update(self._assign_columns(group))

        return assignments

    def _group_overlaps(self, ordered: List[Appointment]) -> List[List[Appointment]]:
        """
        Split start-sorted appointments into maximal overlap chains.

        A chain need not be pairwise overlapping: A-B and B-C overlapping
        puts A, B and C in one group even if A and C do not touch.
        """
        groups: List[List[Appointment]] = []
        group_end: Optional[DateTime] = None

        for appointment in ordered:
            end = _effective_end(appointment)

            if group_end is None or appointment.start >= group_end:
                groups.append([appointment])
                group_end = end
            else:
                groups[-1].append(appointment)
                group_end = max(group_end, end)

        return groups

    def _assign_columns(self, group: List[Appointment]) -> Dict[str, LayoutAssignment]:
        # End time of the last appointment placed in each column
        column_ends: List[DateTime] = []
        placed: Dict[str, int] = {}

        for appointment in group:
            for index, column_end in enumerate(column_ends):
                if column_end <= appointment.start:
                    column_ends[index] = _effective_end(appointment)
                    placed[appointment.id] = index
                    break
            else:
                placed[appointment.id] = len(column_ends)
                column_ends.append(_effective_end(appointment))

        total = len(column_ends)
        return {
            appointment_id: LayoutAssignment(column=column, total_columns=total)
            for appointment_id, column in placed.items()
        }


def _effective_end(appointment: Appointment) -> DateTime:
    # Degenerate appointments take zero time. One starting inside another
    # still opens its own column, so the group reports total_columns > 1
    # even though find_conflicts sees no overlap for that pair.
    return max(appointment.start, appointment.end)


def layout(appointments: Iterable[Appointment]) -> Dict[str, LayoutAssignment]:
    """Shortcut for ``OverlapLayoutEngine().layout``."""
    return OverlapLayoutEngine().layout(appointments)


def appointments_for_day(
    appointments: Optional[Iterable[Appointment]],
    day: DayLike,
    hours: Optional[WorkingHours] = None,
    show_non_working: bool = True,
) -> List[Appointment]:
    """
    Select the appointments rendered on ``day``.

    When non-working hours are hidden, only appointments reaching into
    the open window are kept; a closed day then shows nothing.
    """
    if not appointments:
        return []

    window = day_window(day)
    selected = [a for a in appointments if overlaps(a.interval, window)]

    if show_non_working:
        return selected

    if hours is None or hours.is_closed:
        return []

    open_window = working_window(day, hours)
    return [a for a in selected if overlaps(a.interval, open_window)]
