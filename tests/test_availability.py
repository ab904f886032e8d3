"""
Tests for effective working hours resolution.
"""

from datetime import date

import pendulum

from clinicgrid.domain.availability import (
    AvailabilityResolver,
    day_window,
    hour_of_day,
    resolve,
    working_window,
)
from clinicgrid.domain.models import CalendarException, ExceptionType, WorkingHours

BASE = WorkingHours(start=8, end=17)


def _exception(ex_id: str, ex_type: ExceptionType, start: str, end: str) -> CalendarException:
    return CalendarException(
        id=ex_id,
        type=ex_type,
        date_start=pendulum.parse(start),
        date_end=pendulum.parse(end),
        created_at=pendulum.parse("2024-07-01T00:00:00Z"),
    )


class TestDayHelpers:
    """Tests for day window and hour extraction."""

    def test_day_window_for_date(self):
        """A plain date maps to its UTC midnight-to-midnight window."""
        window = day_window(date(2024, 8, 10))

        assert window.start == pendulum.parse("2024-08-10T00:00:00Z")
        assert window.end == pendulum.parse("2024-08-11T00:00:00Z")

    def test_day_window_for_datetime_uses_utc_date(self):
        """A local evening that is already the next day in UTC uses the UTC date."""
        evening = pendulum.datetime(2024, 8, 10, 23, 30, tz="America/Sao_Paulo")

        assert day_window(evening).start == pendulum.parse("2024-08-11T00:00:00Z")

    def test_hour_of_day_is_fractional_utc(self):
        """Minutes become a fraction; offsets are converted to UTC first."""
        assert hour_of_day(pendulum.parse("2024-08-12T09:30:00Z")) == 9.5
        assert hour_of_day(pendulum.parse("2024-08-12T10:00:00-03:00")) == 13.0

    def test_working_window(self):
        """Fractional hours become absolute instants on the day."""
        window = working_window(date(2024, 8, 12), WorkingHours(start=8.5, end=17))

        assert window.start == pendulum.parse("2024-08-12T08:30:00Z")
        assert window.end == pendulum.parse("2024-08-12T17:00:00Z")


class TestAvailabilityResolver:
    """Tests for AvailabilityResolver."""

    def test_no_exceptions_returns_base(self):
        """Without exceptions the base schedule is returned unchanged."""
        resolver = AvailabilityResolver()

        assert resolver.resolve(date(2024, 8, 12), BASE, []) == BASE
        assert resolver.resolve(date(2024, 8, 12), BASE, None) == BASE

    def test_blackout_closes_day(self):
        """A blackout applicable to the day closes it."""
        exceptions = [
            _exception("1", ExceptionType.BLACKOUT, "2024-08-10T00:00:00Z", "2024-08-11T00:00:00Z"),
        ]

        assert resolve(pendulum.parse("2024-08-10T12:00:00Z"), BASE, exceptions) is None

    def test_blackout_wins_in_any_order(self):
        """Blackout has precedence no matter where it appears in the list."""
        blackout = _exception("1", ExceptionType.BLACKOUT, "2024-08-12T00:00:00Z", "2024-08-13T00:00:00Z")
        extra = _exception("2", ExceptionType.EXTRA_OPEN, "2024-08-12T06:00:00Z", "2024-08-12T20:00:00Z")
        adjust = _exception("3", ExceptionType.DAY_ADJUST, "2024-08-12T10:00:00Z", "2024-08-12T12:00:00Z")

        day = date(2024, 8, 12)
        assert resolve(day, BASE, [blackout, extra, adjust]) is None
        assert resolve(day, BASE, [extra, adjust, blackout]) is None
        assert resolve(day, BASE, [adjust, blackout, extra]) is None

    def test_closed_sentinel_differs_from_zero_hours(self):
        """A closed base comes back as hours, not as the blackout sentinel."""
        closed = WorkingHours(start=0, end=0)

        result = resolve(date(2024, 8, 12), closed, [])

        assert result is not None
        assert result.is_closed

    def test_extra_open_on_closed_day(self):
        """Extra opening on a closed day uses the exception's own hours."""
        exceptions = [
            _exception("2", ExceptionType.EXTRA_OPEN, "2024-08-10T09:00:00Z", "2024-08-10T12:00:00Z"),
        ]

        result = resolve(date(2024, 8, 10), WorkingHours(start=0, end=0), exceptions)

        assert result == WorkingHours(start=9, end=12)

    def test_extra_open_widens_open_day(self):
        """Extra opening on an open day extends the window."""
        exceptions = [
            _exception("2", ExceptionType.EXTRA_OPEN, "2024-08-12T15:00:00Z", "2024-08-12T19:30:00Z"),
        ]

        assert resolve(date(2024, 8, 12), BASE, exceptions) == WorkingHours(start=8, end=19.5)

    def test_day_adjust_replaces_hours(self):
        """Day adjustment replaces the base hours instead of widening them."""
        exceptions = [
            _exception("3", ExceptionType.DAY_ADJUST, "2024-08-12T10:00:00Z", "2024-08-12T16:00:00Z"),
        ]

        assert resolve(date(2024, 8, 12), BASE, exceptions) == WorkingHours(start=10, end=16)

    def test_adjust_after_extra_open_discards_widening(self):
        """Exceptions fold in list order: a later adjustment wins."""
        extra = _exception("2", ExceptionType.EXTRA_OPEN, "2024-08-12T06:00:00Z", "2024-08-12T20:00:00Z")
        adjust = _exception("3", ExceptionType.DAY_ADJUST, "2024-08-12T10:00:00Z", "2024-08-12T16:00:00Z")

        assert resolve(date(2024, 8, 12), BASE, [extra, adjust]) == WorkingHours(start=10, end=16)

    def test_extra_open_after_adjust_widens_adjusted_hours(self):
        """An extra opening listed after an adjustment widens the adjusted hours."""
        adjust = _exception("3", ExceptionType.DAY_ADJUST, "2024-08-12T10:00:00Z", "2024-08-12T16:00:00Z")
        extra = _exception("2", ExceptionType.EXTRA_OPEN, "2024-08-12T15:00:00Z", "2024-08-12T18:00:00Z")

        assert resolve(date(2024, 8, 12), BASE, [adjust, extra]) == WorkingHours(start=10, end=18)

    def test_exceptions_on_other_days_are_ignored(self):
        """Only exceptions intersecting the day are applied."""
        exceptions = [
            _exception("1", ExceptionType.BLACKOUT, "2024-08-11T00:00:00Z", "2024-08-12T00:00:00Z"),
            _exception("3", ExceptionType.DAY_ADJUST, "2024-08-13T10:00:00Z", "2024-08-13T16:00:00Z"),
        ]

        assert resolve(date(2024, 8, 12), BASE, exceptions) == BASE

    def test_multi_day_blackout_applies_to_each_day(self):
        """A blackout spanning several days closes every day it touches."""
        exceptions = [
            _exception("1", ExceptionType.BLACKOUT, "2024-08-12T12:00:00Z", "2024-08-14T12:00:00Z"),
        ]

        assert resolve(date(2024, 8, 12), BASE, exceptions) is None
        assert resolve(date(2024, 8, 13), BASE, exceptions) is None
        assert resolve(date(2024, 8, 14), BASE, exceptions) is None
        assert resolve(date(2024, 8, 15), BASE, exceptions) == BASE

    def test_degenerate_exception_never_applies(self):
        """An exception with end before start is ignored."""
        exceptions = [
            _exception("1", ExceptionType.BLACKOUT, "2024-08-12T12:00:00Z", "2024-08-12T08:00:00Z"),
        ]

        assert resolve(date(2024, 8, 12), BASE, exceptions) == BASE

    def test_applicable_exceptions_keep_caller_order(self):
        """Filtering never re-sorts the exceptions."""
        late = _exception("late", ExceptionType.EXTRA_OPEN, "2024-08-12T18:00:00Z", "2024-08-12T20:00:00Z")
        early = _exception("early", ExceptionType.EXTRA_OPEN, "2024-08-12T06:00:00Z", "2024-08-12T07:00:00Z")

        applicable = AvailabilityResolver().applicable_exceptions(date(2024, 8, 12), [late, early])

        assert [ex.id for ex in applicable] == ["late", "early"]
