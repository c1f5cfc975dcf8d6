"""Credential persistence in the OS keychain (macOS Keychain / Windows Credential Manager)."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "RepoDoc"
GITHUB_TOKEN = "github_pat"
GEMINI_API_KEY = "gemini_api_key"

_AVAILABLE = False

try:
    import keyring

    _AVAILABLE = True
except ImportError:
    logger.warning("keyring not available; credential persistence disabled")


class CredentialStore:
    """Get/set/remove for named credential strings.

    Every method degrades to a no-op result when the keychain is missing or
    refuses the operation; callers treat that as "nothing stored".
    """

    def __init__(self, service: str = SERVICE_NAME):
        self.service = service

    @staticmethod
    def is_available() -> bool:
        return _AVAILABLE

    def get(self, key: str) -> str | None:
        if not _AVAILABLE:
            return None
        try:
            return keyring.get_password(self.service, key)
        except Exception as exc:
            logger.warning("Failed to read %s from keyring: %s", key, exc)
            return None

    def set(self, key: str, value: str) -> bool:
        """Store *value*; an empty value is ignored. Returns True on success."""
        value = value.strip()
        if not _AVAILABLE or not value:
            return False
        try:
            keyring.set_password(self.service, key, value)
            return True
        except Exception as exc:
            logger.warning("Failed to save %s to keyring: %s", key, exc)
            return False

    def remove(self, key: str) -> bool:
        if not _AVAILABLE:
            return False
        try:
            keyring.delete_password(self.service, key)
            return True
        except Exception as exc:
            logger.warning("Failed to delete %s from keyring: %s", key, exc)
            return False
