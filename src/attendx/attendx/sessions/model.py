from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import SessionStatus
from ..geo.model import GeoPoint


@dataclass(frozen=True)
class CourseSelection:
    """What the lecturer picks before opening a session."""

    department_id: str
    level: str
    course_id: str


@dataclass(frozen=True)
class Session:
    """Domain entity: a geofenced attendance session."""

    session_id: str
    lecturer_id: str
    course_id: str
    department_id: str
    level: str
    session_key: str
    start_time: int
    location: GeoPoint
    radius: float
    active: bool
    end_time: Optional[int] = None

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.ACTIVE if self.active else SessionStatus.ENDED

    def to_dict(self) -> dict:
        return {
            "id": self.session_id,
            "lecturerId": self.lecturer_id,
            "courseId": self.course_id,
            "departmentId": self.department_id,
            "level": self.level,
            "sessionKey": self.session_key,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": self.location.to_dict(),
            "radius": self.radius,
            "active": self.active,
        }


@dataclass(frozen=True)
class SessionSummary:
    """Read-model for the history list."""

    session: Session
    course_label: str
    attendance_count: int
