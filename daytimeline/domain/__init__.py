"""
Domain layer - Pure business logic without external dependencies.
"""

from .compositor import TimelineCompositor
from .models import (
    AppointmentInterval,
    BlockInterval,
    Segment,
    SegmentKind,
    ShiftWindow,
    StaffDaySchedule,
)

__all__ = [
    "AppointmentInterval",
    "BlockInterval",
    "Segment",
    "SegmentKind",
    "ShiftWindow",
    "StaffDaySchedule",
    "TimelineCompositor",
]
