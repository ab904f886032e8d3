"""
Quantized day grid used for rendering and pointer hit-testing.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .availability import DayLike, day_window
from .models import Appointment, WorkingHours

HOURS_PER_DAY = 24
BLOCK_GAP_PX = 2.0


@dataclass(frozen=True)
class Block:
    """Vertical placement of an appointment block, in pixels."""
    top_px: float
    height_px: float


@dataclass(frozen=True)
class TimeGrid:
    """
    A day divided into fixed-size slots.

    Invariant: slot_minutes divides an hour evenly.
    """
    slot_minutes: int = 15
    hold_delay_ms: int = 300
    slot_height_px: float = 12.0

    def __post_init__(self):
        if self.slot_minutes <= 0 or 60 % self.slot_minutes != 0:
            raise ValueError(f"slot_minutes must divide 60, got {self.slot_minutes}")
        if self.hold_delay_ms <= 0:
            raise ValueError(f"hold_delay_ms must be greater than zero, got {self.hold_delay_ms}")
        if self.slot_height_px <= 0:
            raise ValueError(f"slot_height_px must be positive, got {self.slot_height_px}")

    @property
    def slots_per_hour(self) -> int:
        return 60 // self.slot_minutes

    @property
    def total_slots(self) -> int:
        return HOURS_PER_DAY * self.slots_per_hour

    def slot_to_time(self, index: int) -> Tuple[int, int]:
        """Convert a slot boundary index to (hour, minute)."""
        return index // self.slots_per_hour, (index % self.slots_per_hour) * self.slot_minutes

    def render_bounds(
        self,
        hours: Optional[WorkingHours],
        show_non_working: bool = False,
    ) -> Tuple[int, int]:
        """
        Slot range ``[start, end)`` that is drawn for a day.

        Hidden non-working hours shrink the range to the open window,
        widened to whole hours. A closed day draws nothing.
        """
        if show_non_working or hours is None:
            return 0, self.total_slots

        start_hour = max(0, math.floor(hours.start))
        if hours.is_closed:
            start_slot = min(start_hour, HOURS_PER_DAY) * self.slots_per_hour
            return start_slot, start_slot

        end_hour = min(HOURS_PER_DAY, math.ceil(hours.end))
        return start_hour * self.slots_per_hour, end_hour * self.slots_per_hour

    def slot_at_offset(self, offset_px: float, render_start: int, render_end: int) -> int:
        """Absolute slot index under a vertical offset, clamped to the drawn range."""
        rendered = render_end - render_start
        offset_index = max(0, min(rendered - 1, math.floor(offset_px / self.slot_height_px)))
        return offset_index + render_start

    def row_states(
        self,
        hours: Optional[WorkingHours],
        show_non_working: bool = False,
    ) -> List[Tuple[int, bool]]:
        """(hour, is_working) for every drawn hour row."""
        start_slot, end_slot = self.render_bounds(hours, show_non_working)
        first_hour = start_slot // self.slots_per_hour
        last_hour = math.ceil(end_slot / self.slots_per_hour)

        return [
            (hour, hours is not None and hours.contains_hour(hour))
            for hour in range(first_hour, last_hour)
        ]

    def block_for(
        self,
        appointment: Appointment,
        day: DayLike,
        hours: Optional[WorkingHours],
        show_non_working: bool = False,
    ) -> Optional[Block]:
        """
        Position of an appointment inside the drawn part of ``day``.

        The appointment is clipped to the drawn window; short appointments
        are stretched to one slot so they stay clickable.
        """
        start_slot, end_slot = self.render_bounds(hours, show_non_working)
        day_start = day_window(day).start
        start_limit = day_start.add(minutes=start_slot * self.slot_minutes)
        end_limit = day_start.add(minutes=end_slot * self.slot_minutes)

        start = max(appointment.start, start_limit)
        end = min(appointment.end, end_limit)
        if end <= start:
            return None

        minutes_from_start = (start - start_limit).total_seconds() / 60
        duration_minutes = max(self.slot_minutes, (end - start).total_seconds() / 60)

        return Block(
            top_px=minutes_from_start / self.slot_minutes * self.slot_height_px,
            height_px=duration_minutes / self.slot_minutes * self.slot_height_px - BLOCK_GAP_PX,
        )
