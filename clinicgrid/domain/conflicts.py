"""
Conflict detection between a candidate time range and existing appointments.
"""

from typing import Iterable, List, Optional

from .intervals import Interval, overlaps
from .models import Appointment


def find_conflicts(
    candidate: Interval,
    existing: Optional[Iterable[Appointment]],
    exclude_id: Optional[str] = None,
) -> List[Appointment]:
    """
    Return the appointments whose time overlaps ``candidate``.

    The appointment with id ``exclude_id`` (the one being edited) is
    never reported. Results keep the input order. An empty candidate
    conflicts with nothing.
    """
    if not existing or candidate.is_empty:
        return []

    return [
        appointment
        for appointment in existing
        if appointment.id != exclude_id and overlaps(appointment.interval, candidate)
    ]
