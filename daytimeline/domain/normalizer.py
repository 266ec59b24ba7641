"""
Normalization of loosely-typed schedule API records into domain intervals.

The schedule service speaks camelCase JSON with "HH:MM" strings. Only the
fields composition needs are lifted out; the full record travels along as the
opaque payload.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .clock import parse_minute
from .models import (
    DEFAULT_APPOINTMENT_MINUTES,
    AppointmentInterval,
    BlockInterval,
    ShiftWindow,
    StaffDaySchedule,
)

logger = logging.getLogger(__name__)


def _optional_minute(value: Any) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return parse_minute(value)


def shift_from_record(record: Mapping[str, Any]) -> ShiftWindow:
    """
    Build a ShiftWindow from a shift record.

    Start and end are only required for working days; a day-off record may
    carry empty times.

    Raises:
        KeyError: If a working shift has no start or end time
        ValueError: If times cannot be parsed or start is not before end
    """
    is_working = bool(record.get("isWorking", False))

    if is_working:
        start = parse_minute(record["startTime"])
        end = parse_minute(record["endTime"])
    else:
        start = _optional_minute(record.get("startTime")) or 0
        end = _optional_minute(record.get("endTime")) or 0

    break_start = _optional_minute(record.get("breakStart"))
    break_end = _optional_minute(record.get("breakEnd"))

    return ShiftWindow(
        is_working=is_working,
        start=start,
        end=end,
        break_start=break_start,
        break_end=break_end,
        weekday=record.get("day"),
    )


def appointment_from_record(
    record: Mapping[str, Any],
    default_duration: int = DEFAULT_APPOINTMENT_MINUTES,
) -> AppointmentInterval:
    """
    Build an AppointmentInterval from an appointment record.

    The start may arrive as ``startTime`` or ``time``; a missing or zero
    duration falls back to ``default_duration``.
    """
    start_str = record.get("startTime") or record.get("time")
    if not start_str:
        raise ValueError(f"Appointment {record.get('id')!r} has no start time")

    duration = int(record.get("duration") or 0) or default_duration

    return AppointmentInterval(
        id=str(record.get("id", "")),
        start=parse_minute(start_str),
        duration_minutes=duration,
        payload=dict(record),
    )


def block_from_record(record: Mapping[str, Any]) -> BlockInterval:
    """Build a BlockInterval from a time-block record."""
    return BlockInterval(
        id=str(record.get("id", "")),
        start=parse_minute(record["startTime"]),
        end=parse_minute(record["endTime"]),
        reason=record.get("reason") or "",
        payload=dict(record),
    )


def _collect(records: Iterable[Any], build, label: str) -> List:
    items = []
    for record in records or []:
        if not isinstance(record, Mapping):
            logger.warning("Skipping %s record %r: not an object", label, record)
            continue
        try:
            items.append(build(record))
        except (KeyError, TypeError, ValueError) as exc:
            # Skip invalid records, the rest of the day is still renderable
            logger.warning("Skipping %s record %r: %s", label, record.get("id"), exc)
    return items


def schedule_from_response(
    data: Mapping[str, Any],
    *,
    staff_id: str,
    date: str,
    default_duration: int = DEFAULT_APPOINTMENT_MINUTES,
) -> StaffDaySchedule:
    """
    Parse a staff schedule response into a StaffDaySchedule.

    Response format:
    {
        "staffId": "...",
        "staffName": "...",
        "date": "2025-03-10",
        "shifts": [{"day": "Mon", "isWorking": true, "startTime": "09:00", ...}],
        "appointments": [{"id": "...", "time": "10:00", "duration": 45, ...}],
        "blocks": [{"id": "...", "startTime": "12:00", "endTime": "12:30", ...}],
        "todayShift": {...} | null
    }

    Raises:
        KeyError, ValueError: If a shift record is unusable
    """
    shifts: Tuple[ShiftWindow, ...] = tuple(
        shift_from_record(record) for record in data.get("shifts") or []
    )

    today_record: Optional[Dict[str, Any]] = data.get("todayShift")
    today_shift = shift_from_record(today_record) if today_record else None

    appointments = _collect(
        data.get("appointments"),
        lambda record: appointment_from_record(record, default_duration),
        "appointment",
    )
    blocks = _collect(data.get("blocks"), block_from_record, "block")

    return StaffDaySchedule(
        staff_id=str(data.get("staffId") or staff_id),
        date=str(data.get("date") or date),
        staff_name=data.get("staffName") or "",
        shifts=shifts,
        appointments=tuple(appointments),
        blocks=tuple(blocks),
        today_shift=today_shift,
    )
