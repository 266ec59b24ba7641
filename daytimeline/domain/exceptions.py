"""
Domain-specific exception hierarchy for the day timeline application.
"""


class TimelineError(Exception):
    """Base class for all application-level errors."""


class DataFetchError(TimelineError):
    """Raised when schedule data for a day cannot be fetched or parsed."""


class BlockMutationError(TimelineError):
    """Raised when a blocked interval cannot be created or deleted."""


class AuthenticationError(TimelineError):
    """Raised when the API token is missing or cannot be stored."""


class MalformedTimeError(TimelineError, ValueError):
    """Raised when a wall-clock string has no usable hour component."""
