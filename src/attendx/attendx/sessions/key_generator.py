from __future__ import annotations

import secrets
import uuid

from ..core.constants import SESSION_KEY_ALPHABET, SESSION_KEY_LENGTH


def generate_session_key(length: int = SESSION_KEY_LENGTH) -> str:
    """Short upper-case alphanumeric code read out by the lecturer.

    Uniqueness across sessions is not checked.
    """
    return "".join(secrets.choice(SESSION_KEY_ALPHABET) for _ in range(length))


def generate_id() -> str:
    return uuid.uuid4().hex
