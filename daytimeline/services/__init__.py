"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .day_schedule import DayScheduleService, DayStatus, DayView, ScheduleClientProtocol

__all__ = ["DayScheduleService", "DayStatus", "DayView", "ScheduleClientProtocol"]
