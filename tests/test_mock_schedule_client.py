"""
Tests for the mock schedule client.
"""

import pytest

from daytimeline.adapters.mock_schedule_client import MockScheduleClient
from daytimeline.domain.compositor import TimelineCompositor
from daytimeline.domain.exceptions import BlockMutationError, DataFetchError
from daytimeline.services.day_schedule import DayScheduleService, DayStatus


DATA = {
    "stf-1": {
        "staffName": "Anna",
        "shifts": [{"day": "Mon", "isWorking": True, "startTime": "09:00", "endTime": "17:00"}],
        "appointments": [
            {"id": "every-day", "time": "10:00", "duration": 30},
            {"id": "only-monday", "date": "2025-03-10", "time": "11:00", "duration": 30},
        ],
        "blocks": [],
    }
}


class TestMockScheduleClient:
    """Tests for MockScheduleClient."""

    def test_bundled_data_loads(self):
        client = MockScheduleClient()

        schedule = client.get_staff_schedule("stf-anna-01", "2025-03-10")

        assert schedule.staff_name == "Anna Keller"
        assert len(schedule.shifts) == 7
        # Appointment with duration 0 falls back to the default
        assert schedule.appointments[-1].duration_minutes == 30

    def test_dated_records_only_show_on_their_day(self):
        client = MockScheduleClient(data=DATA)

        monday = client.get_staff_schedule("stf-1", "2025-03-10")
        next_monday = client.get_staff_schedule("stf-1", "2025-03-17")

        assert [a.id for a in monday.appointments] == ["every-day", "only-monday"]
        assert [a.id for a in next_monday.appointments] == ["every-day"]

    def test_unknown_staff(self):
        with pytest.raises(DataFetchError, match="not found"):
            MockScheduleClient(data=DATA).get_staff_schedule("ghost", "2025-03-10")

    def test_create_and_delete_block(self):
        client = MockScheduleClient(data=DATA)

        block = client.create_block("stf-1", "2025-03-10", "15:00", "15:30", "Call")
        schedule = client.get_staff_schedule("stf-1", "2025-03-10")
        assert [b.id for b in schedule.blocks] == [block.id]
        assert client.get_staff_schedule("stf-1", "2025-03-11").blocks == ()

        client.delete_block("stf-1", block.id)
        assert client.get_staff_schedule("stf-1", "2025-03-10").blocks == ()

    def test_injected_data_is_not_mutated(self):
        client = MockScheduleClient(data=DATA)

        client.create_block("stf-1", "2025-03-10", "15:00", "15:30", "Call")

        assert DATA["stf-1"]["blocks"] == []

    def test_delete_unknown_block(self):
        with pytest.raises(BlockMutationError, match="Block not found"):
            MockScheduleClient(data=DATA).delete_block("stf-1", "blk-missing")

    def test_unusable_shift_raises_data_fetch_error(self):
        data = {
            "stf-1": {
                "shifts": [{"day": "Mon", "isWorking": True, "startTime": "17:00", "endTime": "09:00"}],
            }
        }

        with pytest.raises(DataFetchError, match="Could not parse schedule response"):
            MockScheduleClient(data=data).get_staff_schedule("stf-1", "2025-03-10")

    def test_null_appointment_is_dropped(self):
        data = {
            "stf-1": {
                "shifts": [{"day": "Mon", "isWorking": True, "startTime": "09:00", "endTime": "17:00"}],
                "appointments": [None, {"id": "a1", "time": "10:00", "duration": 30}],
            }
        }

        schedule = MockScheduleClient(data=data).get_staff_schedule("stf-1", "2025-03-10")

        assert [a.id for a in schedule.appointments] == ["a1"]

    def test_bundled_monday_timeline(self):
        """The bundled fixture composes into a full, gap-free Monday."""
        service = DayScheduleService(
            schedule_client=MockScheduleClient(),
            compositor=TimelineCompositor(),
        )

        view = service.get_day_view(staff_id="stf-anna-01", date="2025-03-10")

        assert view.status is DayStatus.WORKING
        assert [seg.kind.value for seg in view.segments] == [
            "available", "appointment", "available", "appointment", "available",
            "break", "available", "appointment", "available", "block", "available",
        ]
        assert view.segments[0].start == 540
        assert view.segments[-1].end == 1020

    def test_bundled_sunday_is_day_off(self):
        service = DayScheduleService(
            schedule_client=MockScheduleClient(),
            compositor=TimelineCompositor(),
        )

        view = service.get_day_view(staff_id="stf-anna-01", date="2025-03-16")

        assert view.status is DayStatus.DAY_OFF

    def test_bundled_staff_without_shifts(self):
        service = DayScheduleService(
            schedule_client=MockScheduleClient(),
            compositor=TimelineCompositor(),
        )

        view = service.get_day_view(staff_id="stf-ben-02", date="2025-03-10")

        assert view.status is DayStatus.NO_SHIFT
