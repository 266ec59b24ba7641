"""
Application services for a staff member's day schedule.

The service coordinates fetching day data via a schedule client adapter and
delegates the timeline composition to the domain-level
``TimelineCompositor``. Deciding between "no shift configured", "day off" and
a working day happens here, so the compositor only ever sees working shifts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

import pendulum

from ..domain.clock import parse_minute
from ..domain.compositor import TimelineCompositor
from ..domain.exceptions import BlockMutationError, MalformedTimeError
from ..domain.models import BlockInterval, ShiftWindow, StaffDaySchedule, Timeline

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_REASON = "Blocked time"


class ScheduleClientProtocol(Protocol):
    """Protocol describing the schedule client behaviour needed by the service."""

    def get_staff_schedule(self, staff_id: str, date: str) -> StaffDaySchedule:
        """Return shifts, appointments and blocks for one day."""

    def create_block(
        self,
        staff_id: str,
        date: str,
        start_time: str,
        end_time: str,
        reason: str,
        is_recurring: bool = False,
    ) -> BlockInterval:
        """Create a blocked interval and return it."""

    def delete_block(self, staff_id: str, block_id: str) -> None:
        """Delete a blocked interval."""


class DayStatus(str, Enum):
    """How a day should be presented."""
    NO_SHIFT = "no_shift"
    DAY_OFF = "day_off"
    WORKING = "working"


@dataclass(frozen=True)
class DayView:
    """A fetched day together with its composed timeline."""
    schedule: StaffDaySchedule
    status: DayStatus
    shift: Optional[ShiftWindow] = None
    segments: Timeline = ()

    @property
    def is_working(self) -> bool:
        return self.status is DayStatus.WORKING


def weekday_label(date: str) -> str:
    """Return the three-letter English weekday name ("Mon") of a YYYY-MM-DD date."""
    return pendulum.from_format(date, "YYYY-MM-DD").format("ddd", locale="en")


class DayScheduleService:
    """
    Orchestrates schedule retrieval, block mutations and timeline composition.

    Dependency inversion toward a protocol makes it easy to plug in the real
    API adapter or the mock implementation in tests.
    """

    def __init__(
        self,
        schedule_client: ScheduleClientProtocol,
        compositor: TimelineCompositor,
    ) -> None:
        self._schedule_client = schedule_client
        self._compositor = compositor

    def fetch_day(self, *, staff_id: str, date: str) -> StaffDaySchedule:
        """
        Fetch the raw day data.

        Raises:
            DataFetchError: If the schedule could not be retrieved
        """
        logger.info("Fetching schedule for %s on %s", staff_id, date)
        return self._schedule_client.get_staff_schedule(staff_id, date)

    def get_day_view(self, *, staff_id: str, date: str) -> DayView:
        """Fetch a day and compose its timeline."""
        schedule = self.fetch_day(staff_id=staff_id, date=date)
        return self.build_day_view(schedule)

    def build_day_view(self, schedule: StaffDaySchedule) -> DayView:
        """
        Turn fetched day data into a DayView.

        The compositor is only invoked for a working shift.
        """
        if not schedule.has_shift_data():
            return DayView(schedule=schedule, status=DayStatus.NO_SHIFT)

        shift = self.select_shift(schedule)
        if shift is None or not shift.is_working:
            return DayView(schedule=schedule, status=DayStatus.DAY_OFF, shift=shift)

        segments = self._compositor.compose(
            shift,
            schedule.appointments,
            schedule.blocks,
        )
        return DayView(
            schedule=schedule,
            status=DayStatus.WORKING,
            shift=shift,
            segments=segments,
        )

    @staticmethod
    def select_shift(schedule: StaffDaySchedule) -> Optional[ShiftWindow]:
        """
        Pick the shift that applies to the schedule's date.

        An explicit ``today_shift`` wins; otherwise the weekly shift for the
        date's weekday is used.
        """
        if schedule.today_shift is not None:
            return schedule.today_shift
        return schedule.shift_for_weekday(weekday_label(schedule.date))

    def create_block(
        self,
        *,
        staff_id: str,
        date: str,
        start_time: str,
        end_time: str,
        reason: str = "",
    ) -> BlockInterval:
        """
        Create a blocked interval after checking the request is complete.

        Raises:
            BlockMutationError: If times are missing or unusable, or the API call fails
        """
        if not staff_id or not start_time or not end_time:
            raise BlockMutationError("Staff member, start time and end time are required.")

        try:
            start = parse_minute(start_time)
            end = parse_minute(end_time)
        except MalformedTimeError as exc:
            raise BlockMutationError(str(exc)) from exc

        if start >= end:
            raise BlockMutationError(
                f"Block start {start_time} must be before block end {end_time}."
            )

        block = self._schedule_client.create_block(
            staff_id=staff_id,
            date=date,
            start_time=start_time,
            end_time=end_time,
            reason=reason.strip() or DEFAULT_BLOCK_REASON,
        )
        logger.info("Created block %s for %s on %s", block.id, staff_id, date)
        return block

    def delete_block(self, *, staff_id: str, block_id: str) -> None:
        """
        Delete a blocked interval.

        Raises:
            BlockMutationError: If the API call fails
        """
        if not staff_id or not block_id:
            raise BlockMutationError("Staff member and block id are required.")

        self._schedule_client.delete_block(staff_id=staff_id, block_id=block_id)
        logger.info("Deleted block %s for %s", block_id, staff_id)
