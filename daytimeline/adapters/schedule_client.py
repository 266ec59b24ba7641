"""
Schedule API client for fetching staff day data and managing time blocks.
"""

import logging
from typing import Any, Dict, Optional, Type

import requests

from ..domain.exceptions import BlockMutationError, DataFetchError, TimelineError
from ..domain.models import DEFAULT_APPOINTMENT_MINUTES, BlockInterval, StaffDaySchedule
from ..domain.normalizer import block_from_record, schedule_from_response

logger = logging.getLogger(__name__)


class ScheduleClient:
    """
    Client for the business schedule endpoints.

    Uses:
    - GET    /api/mobile/business/staff/{staffId}/schedule?date=YYYY-MM-DD
    - POST   /api/mobile/business/staff/{staffId}/blocks
    - DELETE /api/mobile/business/staff/{staffId}/blocks/{blockId}
    """

    STAFF_ENDPOINT = "/api/mobile/business/staff"

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: int = 30,
        default_appointment_minutes: int = DEFAULT_APPOINTMENT_MINUTES,
    ):
        """
        Initialize the schedule API client.

        Args:
            base_url: API root, e.g. https://api.example.com
            access_token: Optional bearer token
            timeout: Request timeout in seconds
            default_appointment_minutes: Duration used for appointments without one
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_appointment_minutes = default_appointment_minutes
        self.headers = {"Content-Type": "application/json"}
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    def get_staff_schedule(self, staff_id: str, date: str) -> StaffDaySchedule:
        """
        Get shifts, appointments and blocks for one staff member and day.

        Args:
            staff_id: Staff member id
            date: Day in YYYY-MM-DD format

        Returns:
            StaffDaySchedule for the requested day

        Raises:
            DataFetchError: If the request fails or the response is unusable
        """
        data = self._request(
            "GET",
            f"{self.STAFF_ENDPOINT}/{staff_id}/schedule",
            error_cls=DataFetchError,
            action="Fetching schedule",
            params={"date": date},
        )

        try:
            return schedule_from_response(
                data,
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
        """
        Create a blocked interval for a staff member.

        Raises:
            BlockMutationError: If the block could not be created
        """
        payload = {
            "staffId": staff_id,
            "date": date,
            "startTime": start_time,
            "endTime": end_time,
            "reason": reason,
            "isRecurring": is_recurring,
        }

        data = self._request(
            "POST",
            f"{self.STAFF_ENDPOINT}/{staff_id}/blocks",
            error_cls=BlockMutationError,
            action="Creating block",
            json=payload,
        )

        record = data.get("block")
        if not isinstance(record, dict):
            raise BlockMutationError("Creating block failed: response contained no block")

        try:
            return block_from_record(record)
        except (KeyError, TypeError, ValueError) as exc:
            raise BlockMutationError(f"Could not parse created block: {exc}") from exc

    def delete_block(self, staff_id: str, block_id: str) -> None:
        """
        Delete a blocked interval.

        Raises:
            BlockMutationError: If the block could not be deleted
        """
        self._request(
            "DELETE",
            f"{self.STAFF_ENDPOINT}/{staff_id}/blocks/{block_id}",
            error_cls=BlockMutationError,
            action="Deleting block",
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        error_cls: Type[TimelineError],
        action: str,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s", method, url)

        try:
            response = requests.request(
                method,
                url,
                headers=self.headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            raise error_cls(f"{action} failed: {e}") from e

        if not response.ok:
            raise error_cls(f"{action} failed: {self._error_message(response)}")

        if not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as e:
            raise error_cls(f"{action} failed: response was not valid JSON") from e

        if not isinstance(data, dict):
            raise error_cls(f"{action} failed: unexpected response format")

        return data

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the API's own error message over the bare status code."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"Request failed: {response.status_code}"
