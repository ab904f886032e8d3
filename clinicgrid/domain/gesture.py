"""
Pointer gesture state machine over the slot grid.

A press that is released quickly on one slot is a coarse slot click; a
press that is held, or dragged across slots, selects an exact range.

States:
    IDLE -> HOUR_PREVIEW   on pointer down (hold timer armed)
    HOUR_PREVIEW -> QUARTER_DRAG   when the hold timer fires, or the
                                   pointer moves off the anchor slot
    any -> IDLE            on pointer up (event emitted) or cancel
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Hashable, Optional, Protocol, Tuple, Union

from .grid import HOURS_PER_DAY, TimeGrid

logger = logging.getLogger(__name__)


class GestureMode(str, Enum):
    IDLE = "IDLE"
    HOUR_PREVIEW = "HOUR_PREVIEW"
    QUARTER_DRAG = "QUARTER_DRAG"


@dataclass(frozen=True)
class SlotClick:
    """Quick tap on a single slot; carries the whole hour it falls in."""
    day: Any
    hour: int


@dataclass(frozen=True)
class RangeSelection:
    """Exact start/end picked by holding or dragging."""
    day: Any
    start_hour: int
    start_minute: int
    end_hour: int
    end_minute: int


GestureEvent = Union[SlotClick, RangeSelection]


class TimerHandle(Protocol):
    """Anything that can be cancelled, like ``threading.Timer``."""

    def cancel(self) -> None:
        """Stop the timer; calling it again must be harmless."""


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def threading_timer(delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
    """Start a daemon ``threading.Timer``."""
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


def monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass
class GestureSession:
    """Transient state between a pointer down and its release."""
    day: Optional[Hashable]
    anchor_slot: int
    current_slot: int
    started_at_ms: float
    mode: GestureMode
    token: int


class GestureInterpreter:
    """
    Turns pointer events over one rendering surface into slot events.

    Only one session exists at a time. A new pointer down replaces the
    active session without emitting anything for it, and a hold timer
    from a replaced session never changes the new one.
    """

    def __init__(
        self,
        grid: TimeGrid,
        on_event: Optional[Callable[[GestureEvent], None]] = None,
        render_end_slot: Optional[int] = None,
        timer_factory: TimerFactory = threading_timer,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.grid = grid
        self.render_end_slot = grid.total_slots if render_end_slot is None else render_end_slot
        self._on_event = on_event
        self._timer_factory = timer_factory
        self._clock = clock
        self._session: Optional[GestureSession] = None
        self._timer: Optional[TimerHandle] = None
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def state(self) -> GestureMode:
        with self._lock:
            return self._session.mode if self._session else GestureMode.IDLE

    @property
    def session(self) -> Optional[GestureSession]:
        """Snapshot of the active session; mutating it has no effect."""
        with self._lock:
            return replace(self._session) if self._session else None

    def selection(self) -> Optional[Tuple[int, int]]:
        """Slot range ``[lo, hi)`` under the active gesture, for the drag overlay."""
        with self._lock:
            if self._session is None:
                return None
            return self._span(self._session)

    def pointer_down(self, slot_index: int, day: Optional[Hashable] = None) -> None:
        with self._lock:
            slot_index = self._clamp_slot(slot_index)
            if self._session is not None:
                logger.debug("Pointer down superseded session %d", self._session.token)
            self._cancel_timer()

            token = next(self._tokens)
            self._session = GestureSession(
                day=day,
                anchor_slot=slot_index,
                current_slot=slot_index,
                started_at_ms=self._clock(),
                mode=GestureMode.HOUR_PREVIEW,
                token=token,
            )
            self._timer = self._timer_factory(
                self.grid.hold_delay_ms / 1000,
                lambda: self._on_hold_elapsed(token),
            )
            logger.debug("Session %d started at slot %d", token, slot_index)

    def pointer_move(self, slot_index: int, day: Optional[Hashable] = None) -> None:
        with self._lock:
            session = self._active_session(day)
            if session is None:
                return

            slot_index = self._clamp_slot(slot_index)
            if session.mode is GestureMode.HOUR_PREVIEW and slot_index != session.anchor_slot:
                self._cancel_timer()
                session.mode = GestureMode.QUARTER_DRAG
                logger.debug("Session %d promoted by movement", session.token)

            session.current_slot = slot_index

    def pointer_up(self, day: Optional[Hashable] = None) -> Optional[GestureEvent]:
        """
        Finish the active gesture.

        Returns:
            The emitted event, or None if there was no matching session
        """
        with self._lock:
            session = self._active_session(day)
            if session is None:
                return None

            self._cancel_timer()
            self._session = None
            event = self._build_event(session, self._clock() - session.started_at_ms)

        logger.debug("Session %d finished with %s", session.token, event)
        if self._on_event is not None:
            self._on_event(event)
        return event

    def pointer_cancel(self) -> None:
        """Drop the active gesture without emitting anything. Safe to repeat."""
        with self._lock:
            self._cancel_timer()
            if self._session is not None:
                logger.debug("Session %d cancelled", self._session.token)
            self._session = None

    def _active_session(self, day: Optional[Hashable]) -> Optional[GestureSession]:
        session = self._session
        if session is None:
            return None
        if day is not None and session.day is not None and day != session.day:
            return None
        return session

    def _on_hold_elapsed(self, token: int) -> None:
        with self._lock:
            session = self._session
            if session is None or session.token != token:
                return
            if session.mode is GestureMode.HOUR_PREVIEW:
                session.mode = GestureMode.QUARTER_DRAG
                logger.debug("Session %d promoted by hold", token)
            self._timer = None

    def _clamp_slot(self, slot_index: int) -> int:
        # Keep the whole session inside the drawn range so lo < end always holds
        return max(0, min(self.render_end_slot - 1, slot_index))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @staticmethod
    def _span(session: GestureSession) -> Tuple[int, int]:
        lo = min(session.anchor_slot, session.current_slot)
        hi = max(session.anchor_slot, session.current_slot) + 1
        return lo, hi

    def _build_event(self, session: GestureSession, elapsed_ms: float) -> GestureEvent:
        lo, hi = self._span(session)

        if hi - lo <= 1 and elapsed_ms < self.grid.hold_delay_ms:
            return SlotClick(day=session.day, hour=lo // self.grid.slots_per_hour)

        start_hour, start_minute = self.grid.slot_to_time(lo)
        end_hour, end_minute = self.grid.slot_to_time(min(hi, self.render_end_slot))
        if end_hour >= HOURS_PER_DAY:
            end_hour, end_minute = HOURS_PER_DAY - 1, 60 - self.grid.slot_minutes

        return RangeSelection(
            day=session.day,
            start_hour=start_hour,
            start_minute=start_minute,
            end_hour=end_hour,
            end_minute=end_minute,
        )
