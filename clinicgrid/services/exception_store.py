"""
In-memory calendar exception store.

Stands in for the persistence collaborator that owns the exception
lifecycle. Records are immutable, so an update replaces by id.
"""

import logging
from typing import Dict, List, Optional

from ..domain.intervals import Interval, overlaps
from ..domain.models import CalendarException

logger = logging.getLogger(__name__)


class InMemoryExceptionStore:
    """Insertion-ordered exception list; order matters for resolution."""

    def __init__(self, exceptions: Optional[List[CalendarException]] = None) -> None:
        self._items: Dict[str, CalendarException] = {}
        for exception in exceptions or []:
            self.add(exception)

    def list(self) -> List[CalendarException]:
        return list(self._items.values())

    def add(self, exception: CalendarException) -> CalendarException:
        self._items[exception.id] = exception
        return exception

    def update(self, exception: CalendarException) -> CalendarException:
        """Replace the record with the same id, keeping its position."""
        if exception.id not in self._items:
            logger.warning("Ignoring update for unknown calendar exception %s", exception.id)
            return exception
        self._items[exception.id] = exception
        return exception

    def remove(self, exception_id: str) -> None:
        self._items.pop(exception_id, None)

    async def list_exceptions(self, window: Interval) -> List[CalendarException]:
        """Exceptions touching ``window``, in insertion order."""
        return [ex for ex in self._items.values() if overlaps(ex.interval, window)]
