"""
Domain models for shift windows, day intervals and timeline segments.

All times are ``Minute`` values: integer offsets from midnight.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

Minute = int

DEFAULT_APPOINTMENT_MINUTES = 30


class SegmentKind(str, Enum):
    """Kinds of rows a day timeline is made of."""
    AVAILABLE = "available"
    APPOINTMENT = "appointment"
    BLOCK = "block"
    BREAK = "break"


@dataclass(frozen=True)
class ShiftWindow:
    """
    One staff member's configured working hours for one day.

    Invariant: start must be before end when the shift is a working one.
    """
    is_working: bool
    start: Minute
    end: Minute
    break_start: Optional[Minute] = None
    break_end: Optional[Minute] = None
    weekday: Optional[str] = None  # "Mon" .. "Sun"

    def __post_init__(self):
        if self.is_working and self.start >= self.end:
            raise ValueError(
                f"Shift start {self.start} must be before shift end {self.end}"
            )

    def duration_minutes(self) -> int:
        """Return the shift length in minutes (0 on a day off)."""
        if not self.is_working:
            return 0
        return self.end - self.start

    def has_break(self) -> bool:
        """Check whether both break boundaries are configured."""
        return self.break_start is not None and self.break_end is not None

    def break_interval(self) -> "BreakInterval | None":
        """Derive the break interval, if the shift defines one."""
        if not self.has_break():
            return None
        return BreakInterval(start=self.break_start, end=self.break_end)


@dataclass(frozen=True)
class AppointmentInterval:
    """An externally booked appointment; its end is derived from the duration."""
    id: str
    start: Minute
    duration_minutes: int = DEFAULT_APPOINTMENT_MINUTES
    payload: Any = field(default=None, compare=False)

    @property
    def end(self) -> Minute:
        return self.start + self.duration_minutes


@dataclass(frozen=True)
class BlockInterval:
    """A manually blocked interval with an explicit end."""
    id: str
    start: Minute
    end: Minute
    reason: str = ""
    payload: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class BreakInterval:
    """The shift's break, synthesized at most once per composition."""
    start: Minute
    end: Minute


@dataclass(frozen=True)
class ClampedEvent:
    """
    A raw interval intersected with the shift window.

    Only lives for the duration of one composition call.
    """
    id: str
    clamped_start: Minute
    clamped_end: Minute
    kind: SegmentKind
    ref: Any = None
    source_id: Optional[str] = None

    @property
    def duration(self) -> int:
        return self.clamped_end - self.clamped_start


@dataclass(frozen=True)
class FreeSpan:
    """An uncovered stretch of the shift window."""
    start: Minute
    end: Minute


@dataclass(frozen=True)
class Segment:
    """
    One typed row of the day timeline.

    ``ref`` is the opaque payload of the originating appointment or block;
    ``source_id`` is that record's id.
    """
    start: Minute
    end: Minute
    kind: SegmentKind
    ref: Any = field(default=None, compare=False)
    source_id: Optional[str] = None

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    @property
    def is_available(self) -> bool:
        return self.kind is SegmentKind.AVAILABLE


Timeline = Tuple[Segment, ...]


@dataclass(frozen=True)
class StaffDaySchedule:
    """Everything the schedule service returned for one staff member and day."""
    staff_id: str
    date: str  # YYYY-MM-DD
    staff_name: str = ""
    shifts: Tuple[ShiftWindow, ...] = ()
    appointments: Tuple[AppointmentInterval, ...] = ()
    blocks: Tuple[BlockInterval, ...] = ()
    today_shift: Optional[ShiftWindow] = None

    def has_shift_data(self) -> bool:
        """Check whether any working hours are configured at all."""
        return bool(self.shifts) or self.today_shift is not None

    def shift_for_weekday(self, weekday: str) -> Optional[ShiftWindow]:
        """Find the weekly shift whose day label matches ("Mon" .. "Sun")."""
        for shift in self.shifts:
            if shift.weekday and shift.weekday.lower() == weekday.lower():
                return shift
        return None
