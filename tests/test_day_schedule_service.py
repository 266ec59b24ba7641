"""
Tests for the DayScheduleService orchestration layer.
"""

from typing import Dict, List

import pytest

from daytimeline.domain.compositor import TimelineCompositor
from daytimeline.domain.exceptions import BlockMutationError, DataFetchError
from daytimeline.domain.models import (
    AppointmentInterval,
    BlockInterval,
    SegmentKind,
    ShiftWindow,
    StaffDaySchedule,
)
from daytimeline.services.day_schedule import DayScheduleService, DayStatus, weekday_label


MONDAY = "2025-03-10"
SUNDAY = "2025-03-16"


class StubScheduleClient:
    """Minimal stub matching ScheduleClientProtocol."""

    def __init__(self, schedule: StaffDaySchedule | None = None, error: Exception | None = None):
        self._schedule = schedule
        self._error = error
        self.calls: List[Dict[str, str]] = []

    def get_staff_schedule(self, staff_id, date):
        self.calls.append({"action": "get", "staff_id": staff_id, "date": date})
        if self._error:
            raise self._error
        return self._schedule

    def create_block(self, staff_id, date, start_time, end_time, reason, is_recurring=False):
        self.calls.append({
            "action": "create",
            "staff_id": staff_id,
            "date": date,
            "start": start_time,
            "end": end_time,
            "reason": reason,
        })
        return BlockInterval(id="blk-new", start=600, end=630, reason=reason)

    def delete_block(self, staff_id, block_id):
        self.calls.append({"action": "delete", "staff_id": staff_id, "block_id": block_id})


class SpyCompositor(TimelineCompositor):
    """Records whether composition was requested."""

    def __init__(self):
        self.invocations = 0

    def compose(self, shift, appointments=(), blocks=()):
        self.invocations += 1
        return super().compose(shift, appointments, blocks)


def _weekly_shifts():
    return (
        ShiftWindow(is_working=True, start=540, end=1020, break_start=780, break_end=840, weekday="Mon"),
        ShiftWindow(is_working=False, start=0, end=0, weekday="Sun"),
    )


def _build_service(schedule=None, error=None):
    client = StubScheduleClient(schedule=schedule, error=error)
    compositor = SpyCompositor()
    return DayScheduleService(schedule_client=client, compositor=compositor), client, compositor


def test_weekday_label():
    assert weekday_label(MONDAY) == "Mon"
    assert weekday_label(SUNDAY) == "Sun"


class TestDayView:
    """Tests for building day views."""

    def test_working_day_is_composed(self):
        schedule = StaffDaySchedule(
            staff_id="stf-1",
            date=MONDAY,
            shifts=_weekly_shifts(),
            appointments=(AppointmentInterval(id="a1", start=600, duration_minutes=60),),
        )
        service, client, compositor = _build_service(schedule)

        view = service.get_day_view(staff_id="stf-1", date=MONDAY)

        assert client.calls == [{"action": "get", "staff_id": "stf-1", "date": MONDAY}]
        assert view.status is DayStatus.WORKING
        assert view.is_working
        assert view.shift.weekday == "Mon"
        assert compositor.invocations == 1
        assert [seg.kind for seg in view.segments] == [
            SegmentKind.AVAILABLE,
            SegmentKind.APPOINTMENT,
            SegmentKind.AVAILABLE,
            SegmentKind.BREAK,
            SegmentKind.AVAILABLE,
        ]

    def test_day_off_does_not_invoke_compositor(self):
        """A non-working day short-circuits before composition."""
        schedule = StaffDaySchedule(staff_id="stf-1", date=SUNDAY, shifts=_weekly_shifts())
        service, _, compositor = _build_service(schedule)

        view = service.get_day_view(staff_id="stf-1", date=SUNDAY)

        assert view.status is DayStatus.DAY_OFF
        assert view.segments == ()
        assert compositor.invocations == 0

    def test_missing_weekday_counts_as_day_off(self):
        """Shifts exist, just none for this weekday."""
        schedule = StaffDaySchedule(staff_id="stf-1", date="2025-03-11", shifts=_weekly_shifts())
        service, _, compositor = _build_service(schedule)

        view = service.get_day_view(staff_id="stf-1", date="2025-03-11")

        assert view.status is DayStatus.DAY_OFF
        assert view.shift is None
        assert compositor.invocations == 0

    def test_no_shift_configured(self):
        """No shift data at all is reported separately from a day off."""
        schedule = StaffDaySchedule(staff_id="stf-1", date=MONDAY)
        service, _, compositor = _build_service(schedule)

        view = service.get_day_view(staff_id="stf-1", date=MONDAY)

        assert view.status is DayStatus.NO_SHIFT
        assert compositor.invocations == 0

    def test_today_shift_wins_over_weekly_pattern(self):
        today = ShiftWindow(is_working=True, start=600, end=720)
        schedule = StaffDaySchedule(
            staff_id="stf-1",
            date=SUNDAY,
            shifts=_weekly_shifts(),
            today_shift=today,
        )
        service, _, _ = _build_service(schedule)

        view = service.get_day_view(staff_id="stf-1", date=SUNDAY)

        assert view.status is DayStatus.WORKING
        assert [(seg.start, seg.end) for seg in view.segments] == [(600, 720)]

    def test_fetch_errors_propagate_without_composition(self):
        service, _, compositor = _build_service(error=DataFetchError("Network error"))

        with pytest.raises(DataFetchError, match="Network error"):
            service.get_day_view(staff_id="stf-1", date=MONDAY)

        assert compositor.invocations == 0


class TestBlockMutations:
    """Tests for creating and deleting blocks."""

    def test_create_block_defaults_reason(self):
        service, client, _ = _build_service()

        block = service.create_block(
            staff_id="stf-1", date=MONDAY, start_time="10:00", end_time="10:30", reason="  "
        )

        assert block.id == "blk-new"
        assert client.calls[-1]["reason"] == "Blocked time"
        assert client.calls[-1]["start"] == "10:00"

    @pytest.mark.parametrize(
        "start, end",
        [("", "10:30"), ("10:00", ""), ("10:30", "10:00"), ("10:00", "10:00"), ("soon", "11:00")],
    )
    def test_create_block_rejects_bad_times_before_calling_api(self, start, end):
        service, client, _ = _build_service()

        with pytest.raises(BlockMutationError):
            service.create_block(staff_id="stf-1", date=MONDAY, start_time=start, end_time=end)

        assert client.calls == []

    def test_delete_block(self):
        service, client, _ = _build_service()

        service.delete_block(staff_id="stf-1", block_id="blk-1")

        assert client.calls == [{"action": "delete", "staff_id": "stf-1", "block_id": "blk-1"}]

    def test_delete_block_requires_id(self):
        service, client, _ = _build_service()

        with pytest.raises(BlockMutationError):
            service.delete_block(staff_id="stf-1", block_id="")

        assert client.calls == []
