"""
Effective working hours for a single day.

The base weekly schedule is combined with calendar exceptions by an
ordered left fold. Exceptions are applied in the order the caller gives
them; they are deliberately not sorted by type or time, so a DAY_ADJUST
listed after an EXTRA_OPEN discards the widening.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

import pendulum
from pendulum import DateTime

from .intervals import Interval, overlaps
from .models import CalendarException, ExceptionType, WorkingHours, to_time_point

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime]


def day_window(day: DayLike) -> Interval:
    """
    Return the UTC ``[00:00, 24:00)`` window of a calendar day.

    Datetimes are converted to UTC first and their calendar date is used.
    """
    if isinstance(day, datetime):
        day = to_time_point(day).in_timezone("UTC").date()
    start = pendulum.datetime(day.year, day.month, day.day, tz="UTC")
    return Interval(start=start, end=start.add(days=1))


def hour_of_day(point: DateTime) -> float:
    """UTC hour of an instant as a fractional hour (minutes / 60)."""
    utc = point.in_timezone("UTC")
    return utc.hour + utc.minute / 60


def working_window(day: DayLike, hours: WorkingHours) -> Interval:
    """Absolute UTC interval covered by ``hours`` on ``day``."""
    start = day_window(day).start
    return Interval(
        start=start.add(seconds=round(hours.start * 3600)),
        end=start.add(seconds=round(hours.end * 3600)),
    )


class AvailabilityResolver:
    """
    Resolves the open hours of a day from a base schedule and exceptions.

    Algorithm:
    1. Keep the exceptions whose interval intersects the day's UTC window
    2. Any BLACKOUT among them closes the day, regardless of list order
    3. Fold the rest left-to-right, starting from the base hours:
       - DAY_ADJUST replaces the hours with the exception's own range
       - EXTRA_OPEN opens a closed day, or widens an open one
    """

    def resolve(
        self,
        day: DayLike,
        base: WorkingHours,
        exceptions: Optional[Iterable[CalendarException]] = None,
    ) -> Optional[WorkingHours]:
        """
        Compute the effective working hours for ``day``.

        Returns:
            The resulting WorkingHours, or None when the day is blacked out.
            None is the only closed-by-exception value; a base of {0, 0}
            comes back as WorkingHours(0, 0).
        """
        applicable = self.applicable_exceptions(day, exceptions)

        if any(ex.type is ExceptionType.BLACKOUT for ex in applicable):
            logger.debug("Day %s closed by blackout", day)
            return None

        result = base
        for ex in applicable:
            result = self._apply(result, ex)

        if applicable:
            logger.debug(
                "Day %s resolved to %s after %d exception(s)", day, result, len(applicable)
            )
        return result

    def applicable_exceptions(
        self,
        day: DayLike,
        exceptions: Optional[Iterable[CalendarException]],
    ) -> List[CalendarException]:
        """Exceptions touching the day, in the caller's order."""
        if not exceptions:
            return []

        window = day_window(day)
        return [ex for ex in exceptions if overlaps(ex.interval, window)]

    @staticmethod
    def _apply(current: WorkingHours, ex: CalendarException) -> WorkingHours:
        start_hour = hour_of_day(ex.date_start)
        end_hour = hour_of_day(ex.date_end)

        if ex.type is ExceptionType.DAY_ADJUST:
            return WorkingHours(start=start_hour, end=end_hour)

        if ex.type is ExceptionType.EXTRA_OPEN:
            if current.is_closed:
                return WorkingHours(start=start_hour, end=end_hour)
            return WorkingHours(
                start=min(current.start, start_hour),
                end=max(current.end, end_hour),
            )

        return current


def resolve(
    day: DayLike,
    base: WorkingHours,
    exceptions: Optional[Iterable[CalendarException]] = None,
) -> Optional[WorkingHours]:
    """Shortcut for ``AvailabilityResolver().resolve``."""
    return AvailabilityResolver().resolve(day, base, exceptions)
