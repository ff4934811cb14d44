from __future__ import annotations

import logging
from typing import Optional

from ..attendance.repository import DeviceLockRepository, RecordRepository
from ..core.enums import EventTopic
from ..events.bus import EventBus
from ..sessions.repository import SessionRepository

logger = logging.getLogger(__name__)


class ResetService:
    """Use case: wipe all sessions, records and device locks."""

    def __init__(
        self,
        sessions: SessionRepository,
        records: RecordRepository,
        device_locks: DeviceLockRepository,
        *,
        events: Optional[EventBus] = None,
    ):
        self._sessions = sessions
        self._records = records
        self._locks = device_locks
        self._events = events

    def reset_all(self) -> None:
        # Records and locks first so no record outlives its session.
        self._records.clear()
        self._locks.clear()
        self._sessions.clear()
        logger.warning("all attendance data has been reset")
        if self._events:
            self._events.publish(EventTopic.STORE_RESET)
