from __future__ import annotations

"""Auth refresh-token storage in the OS keyring.

A failing keyring backend is logged and treated as "nothing stored"; the
session then simply asks for the password again on the next start.
"""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

SERVICE_NAME = "jee_timer"
REFRESH_TOKEN_USER = "refresh_token"
_log = logging.getLogger(__name__)


def save_refresh_token(token: str) -> bool:
    try:
        keyring.set_password(SERVICE_NAME, REFRESH_TOKEN_USER, token)
    except KeyringError as e:
        _log.warning("keyring storage failed: %s", e)
        return False
    _log.info("refresh token stored", extra={"_json_token": redact(token)})
    return True


def load_refresh_token() -> Optional[str]:
    try:
        return keyring.get_password(SERVICE_NAME, REFRESH_TOKEN_USER)
    except KeyringError as e:
        _log.warning("keyring read failed: %s", e)
        return None


def clear_refresh_token() -> None:
    try:
        keyring.delete_password(SERVICE_NAME, REFRESH_TOKEN_USER)
    except PasswordDeleteError:
        pass  # nothing stored
    except KeyringError as e:
        _log.warning("keyring delete failed: %s", e)


def redact(value: str | None) -> str:
    if not value:
        return "<none>"
    if len(value) <= 6:
        return "***"
    return value[:3] + "***" + value[-3:]


__all__ = ["save_refresh_token", "load_refresh_token", "clear_refresh_token", "redact"]
