from __future__ import annotations

import logging
import math
import threading
from dataclasses import replace
from typing import Callable, Optional, Sequence

from ..attendance.repository import RecordRepository
from ..common.datetime_utils import format_countdown, minutes_to_ms, now_ms as _now_ms
from ..common.validators import require_non_empty
from ..core.catalog import find_course
from ..core.constants import DEFAULT_RADIUS_METERS, LINK_EXPIRY_MINUTES, PORTAL_FRAGMENT
from ..core.enums import EventTopic
from ..core.exceptions import SessionNotFoundError, ValidationError
from ..events.bus import EventBus
from ..geo.location import LocationProvider, acquire_position
from .key_generator import generate_id, generate_session_key
from .model import CourseSelection, Session, SessionSummary
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def portal_link(origin: str, path: str, session_id: str) -> str:
    """Link students open to reach the submission form."""
    return f"{origin}{path}{PORTAL_FRAGMENT}{session_id}"


class SessionLifecycle:
    """Use case: open, close and inspect attendance sessions."""

    def __init__(
        self,
        sessions: SessionRepository,
        records: RecordRepository,
        *,
        events: Optional[EventBus] = None,
        default_radius: float = DEFAULT_RADIUS_METERS,
        link_expiry_minutes: float = LINK_EXPIRY_MINUTES,
        key_generator: Callable[[], str] = generate_session_key,
        id_generator: Callable[[], str] = generate_id,
    ):
        self._sessions = sessions
        self._records = records
        self._events = events
        self._default_radius = float(default_radius)
        self._link_expiry_ms = minutes_to_ms(link_expiry_minutes)
        self._key_generator = key_generator
        self._id_generator = id_generator
        # Serializes deactivate-then-add so two starts cannot both stay active.
        self._start_lock = threading.Lock()

    def start(
        self,
        lecturer_id: str,
        selection: CourseSelection,
        locator: LocationProvider,
        *,
        radius: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        now_ms: Optional[int] = None,
    ) -> Session:
        department_id = require_non_empty(selection.department_id, "Department")
        level = require_non_empty(selection.level, "Level")
        course_id = require_non_empty(selection.course_id, "Course")

        radius = self._default_radius if radius is None else float(radius)
        if not math.isfinite(radius) or radius <= 0:
            raise ValidationError("Radius must be a positive number")

        # Raises LocationUnavailableError; nothing has been written yet.
        location = acquire_position(locator, cancel=cancel)

        with self._start_lock:
            now = now_ms if now_ms is not None else _now_ms()
            session = Session(
                session_id=self._id_generator(),
                lecturer_id=lecturer_id or "anonymous",
                course_id=course_id,
                department_id=department_id,
                level=level,
                session_key=self._key_generator().upper(),
                start_time=now,
                location=location,
                radius=radius,
                active=True,
            )
            deactivated = self._sessions.deactivate_all()
            self._sessions.add(session)

        logger.info(
            "session %s started for %s (deactivated %d prior sessions)",
            session.session_id,
            session.course_id,
            deactivated,
        )
        self._publish(EventTopic.SESSION_STARTED, session)
        return session

    def end(self, session_id: str, *, now_ms: Optional[int] = None) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise SessionNotFoundError(f"Session {session_id} not found")
        if not session.active:
            return session

        ended = replace(session, active=False, end_time=now_ms if now_ms is not None else _now_ms())
        self._sessions.update(ended)
        logger.info("session %s ended", session_id)
        self._publish(EventTopic.SESSION_ENDED, ended)
        return ended

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get_by_id(session_id)

    def require(self, session_id: str) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def get_active(self) -> Optional[Session]:
        return next((s for s in self._sessions.list_all() if s.active), None)

    def time_left_ms(self, session: Session, *, now_ms: Optional[int] = None) -> int:
        now = now_ms if now_ms is not None else _now_ms()
        return self._link_expiry_ms - (now - session.start_time)

    def is_key_expired(self, session: Session, *, now_ms: Optional[int] = None) -> bool:
        return self.time_left_ms(session, now_ms=now_ms) <= 0

    def countdown_label(self, session: Session, *, now_ms: Optional[int] = None) -> str:
        return format_countdown(self.time_left_ms(session, now_ms=now_ms))

    def history(self) -> Sequence[SessionSummary]:
        counts: dict[str, int] = {}
        for r in self._records.list_all():
            counts[r.session_id] = counts.get(r.session_id, 0) + 1

        sessions = sorted(self._sessions.list_all(), key=lambda s: s.start_time, reverse=True)
        out = []
        for s in sessions:
            course = find_course(s.course_id)
            out.append(
                SessionSummary(
                    session=s,
                    course_label=course.label if course else s.course_id,
                    attendance_count=counts.get(s.session_id, 0),
                )
            )
        return out

    def roster(self, session_id: str):
        """Records for one session, newest first."""
        self.require(session_id)
        records = self._records.list_for_session(session_id)
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def records_since(self, session_id: str, since_ms: int):
        """Polling fallback: records created strictly after since_ms."""
        return [r for r in self.roster(session_id) if r.timestamp > since_ms]

    def _publish(self, topic: EventTopic, session: Session) -> None:
        if self._events:
            self._events.publish(topic, {"session_id": session.session_id, "active": session.active})
