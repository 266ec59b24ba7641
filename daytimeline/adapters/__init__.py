"""
Adapters layer - External integrations (schedule API, keyring).
"""

from .mock_schedule_client import MockScheduleClient
from .schedule_client import ScheduleClient
from .token_store import TokenStore

__all__ = ["MockScheduleClient", "ScheduleClient", "TokenStore"]
