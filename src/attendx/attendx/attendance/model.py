from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..geo.model import GeoPoint


@dataclass(frozen=True)
class Submission:
    """What a student sends from the portal form."""

    session_key: str
    matric_no: str
    name: str
    department: str
    face_image: Optional[str] = None
    camera_active: bool = False


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one accepted presence proof. Immutable once stored."""

    record_id: str
    session_id: str
    student_name: str
    matric_no: str
    department: str
    timestamp: int
    location: GeoPoint
    face_image: Optional[str] = None

    def to_dict(self, *, include_face: bool = True) -> dict:
        data = {
            "id": self.record_id,
            "sessionId": self.session_id,
            "studentName": self.student_name,
            "matricNo": self.matric_no,
            "department": self.department,
            "timestamp": self.timestamp,
            "location": self.location.to_dict(),
            "hasFace": self.face_image is not None,
        }
        if include_face:
            data["faceImage"] = self.face_image
        return data


@dataclass(frozen=True)
class DeviceLock:
    """Binding of one student identity to one client for one session."""

    device_id: str
    session_id: str
    matric_no: str
    created_at: int

    def to_dict(self) -> dict:
        return {
            "deviceId": self.device_id,
            "sessionId": self.session_id,
            "matricNo": self.matric_no,
            "createdAt": self.created_at,
        }
