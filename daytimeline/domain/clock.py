"""
Conversion between "HH:MM" wall-clock strings and minute offsets.
"""

import logging
import re
from typing import Optional

from .exceptions import MalformedTimeError
from .models import Minute

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def _leading_int(component: str) -> Optional[int]:
    match = _LEADING_DIGITS.match(component)
    if match is None:
        return None
    return int(match.group(1))


def parse_minute(time_str: str) -> Minute:
    """
    Parse an "HH:MM" string into minutes since midnight.

    A missing or unreadable minute component counts as 0, so "9" and "9:"
    both give 540. Range checks are left to the data source.

    Raises:
        MalformedTimeError: If the hour component is not a number
    """
    hour_part, _, minute_part = str(time_str).partition(":")

    hour = _leading_int(hour_part)
    if hour is None:
        raise MalformedTimeError(f"Cannot read hour from time string: '{time_str}'")

    minute = _leading_int(minute_part)
    if minute is None:
        if minute_part.strip():
            logger.warning("Unreadable minutes in '%s', using 0", time_str)
        minute = 0

    return hour * 60 + minute


def format_minute(minutes: Minute) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def format_range(start: Minute, end: Minute) -> str:
    return f"{format_minute(start)} - {format_minute(end)}"
