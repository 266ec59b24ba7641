"""
Mock schedule API client for working without a backend.
"""

import copy
import json
from itertools import count
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import BlockMutationError, DataFetchError
from ..domain.models import DEFAULT_APPOINTMENT_MINUTES, BlockInterval, StaffDaySchedule
from ..domain.normalizer import block_from_record, schedule_from_response


class MockScheduleClient:
    """
    Mock client that simulates the schedule API.

    Schedules are loaded from mock_schedule_data.json, keyed by staff id.
    Appointment and block records carrying a ``date`` only show up on that
    day; records without one show up every day. Blocks created or deleted
    through this client live in memory only.
    """

    def __init__(
        self,
        data: Optional[Dict[str, Any]] = None,
        default_appointment_minutes: int = DEFAULT_APPOINTMENT_MINUTES,
    ):
        """
        Initialize the mock client.

        Args:
            data: Optional schedule data; defaults to the bundled JSON file
            default_appointment_minutes: Duration used for appointments without one
        """
        self.default_appointment_minutes = default_appointment_minutes
        self._ids = count(1)
        if data is None:
            self._load_schedule_data()
        else:
            self.schedules = copy.deepcopy(data)

    def _load_schedule_data(self) -> None:
        """Load mock schedule data from JSON file."""
        data_file = Path(__file__).parent / "mock_schedule_data.json"

        if data_file.exists():
            with open(data_file, "r", encoding="utf-8") as f:
                self.schedules = json.load(f)
        else:
            self.schedules = {}

    def _staff_entry(self, staff_id: str, error_cls) -> Dict[str, Any]:
        entry = self.schedules.get(staff_id)
        if entry is None:
            raise error_cls(f"Staff member not found: {staff_id}")
        return entry

    @staticmethod
    def _on_date(records: List[Dict[str, Any]], date: str) -> List[Dict[str, Any]]:
        return [
            record
            for record in records
            if not isinstance(record, dict) or record.get("date", date) == date
        ]

    def get_staff_schedule(self, staff_id: str, date: str) -> StaffDaySchedule:
        """
        Return the mock schedule for a staff member and day.

        Raises:
            DataFetchError: If the staff member is unknown or the stored data is unusable
        """
        entry = self._staff_entry(staff_id, DataFetchError)

        response = {
            "staffId": staff_id,
            "staffName": entry.get("staffName", ""),
            "date": date,
            "shifts": entry.get("shifts", []),
            "appointments": self._on_date(entry.get("appointments", []), date),
            "blocks": self._on_date(entry.get("blocks", []), date),
            "todayShift": None,
        }

        try:
            return schedule_from_response(
                response,
                staff_id=staff_id,
                date=date,
                default_duration=self.default_appointment_minutes,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise DataFetchError(f"Could not parse schedule response: {exc}") from exc

    def create_block(
        self,
        staff_id: str,
        date: str,
        start_time: str,
        end_time: str,
        reason: str,
        is_recurring: bool = False,
    ) -> BlockInterval:
        """Store a new block in memory."""
        entry = self._staff_entry(staff_id, BlockMutationError)

        record = {
            "id": f"blk-mock-{next(self._ids)}",
            "date": date,
            "startTime": start_time,
            "endTime": end_time,
            "reason": reason,
            "isRecurring": is_recurring,
        }
        try:
            block = block_from_record(record)
        except ValueError as exc:
            raise BlockMutationError(f"Creating block failed: {exc}") from exc

        entry.setdefault("blocks", []).append(record)
        return block

    def delete_block(self, staff_id: str, block_id: str) -> None:
        """Remove a block from memory."""
        entry = self._staff_entry(staff_id, BlockMutationError)
        blocks = entry.get("blocks", [])

        remaining = [record for record in blocks if record.get("id") != block_id]
        if len(remaining) == len(blocks):
            raise BlockMutationError(f"Block not found: {block_id}")

        entry["blocks"] = remaining
