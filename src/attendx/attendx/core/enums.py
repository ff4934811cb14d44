from __future__ import annotations

from enum import Enum


class SessionStatus(str, Enum):
    """Session lifecycle; one-way ACTIVE -> ENDED."""

    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


class RejectionReason(str, Enum):
    """Why a student submission was refused."""

    SESSION_INACTIVE = "SESSION_INACTIVE"
    DEVICE_LOCKED = "DEVICE_LOCKED"
    INVALID_KEY = "INVALID_KEY"
    FACE_CAPTURE_FAILED = "FACE_CAPTURE_FAILED"
    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    DUPLICATE_SUBMISSION = "DUPLICATE_SUBMISSION"


class EventTopic(str, Enum):
    """Change notifications emitted by the services."""

    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    RECORD_CREATED = "record_created"
    STORE_RESET = "store_reset"
