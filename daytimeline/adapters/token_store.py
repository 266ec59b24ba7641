"""
API token storage in the operating system keyring.
"""

from __future__ import annotations

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


KEYRING_SERVICE_NAME = "daytimeline"


class TokenStore:
    """
    Keeps the schedule API bearer token in the keyring.

    Tokens are stored per API base URL so several backends can be used side
    by side.
    """

    def __init__(self, api_base_url: str):
        self._key_identifier = api_base_url.rstrip("/")

    def get_token(self) -> Optional[str]:
        """Return the stored token, or None if there is none."""
        try:
            return keyring.get_password(KEYRING_SERVICE_NAME, self._key_identifier)
        except KeyringError as exc:  # pragma: no cover - environment dependent
            logger.warning("Reading credentials from keyring failed: %s", exc)
            return None

    def require_token(self) -> str:
        """
        Return the stored token.

        Raises:
            AuthenticationError: If no token has been stored
        """
        token = self.get_token()
        if not token:
            raise AuthenticationError(
                "No API token stored. Run 'daytimeline login' first or use --mock."
            )
        return token

    def save_token(self, token: str) -> None:
        """
        Store a token.

        Raises:
            AuthenticationError: If the token is empty or the keyring rejects it
        """
        token = token.strip()
        if not token:
            raise AuthenticationError("Refusing to store an empty token.")

        try:
            keyring.set_password(KEYRING_SERVICE_NAME, self._key_identifier, token)
        except KeyringError as exc:
            raise AuthenticationError(f"Could not store token in keyring: {exc}") from exc

    def clear(self) -> None:
        """Remove the stored token, if any."""
        try:
            keyring.delete_password(KEYRING_SERVICE_NAME, self._key_identifier)
        except PasswordDeleteError:
            logger.debug("No stored token for %s", self._key_identifier)
        except KeyringError as exc:  # pragma: no cover - environment dependent
            logger.warning("Could not remove credentials from keyring: %s", exc)
