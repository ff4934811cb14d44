from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RejectionReason
from .model import AttendanceRecord

REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.SESSION_INACTIVE: "This session is no longer active.",
    RejectionReason.DEVICE_LOCKED: "This device has already been used to submit attendance for {matric_no} in this session.",
    RejectionReason.INVALID_KEY: "Incorrect Session Key. Please ask your lecturer.",
    RejectionReason.FACE_CAPTURE_FAILED: "Face capture failed. Please allow camera access and try again.",
    RejectionReason.LOCATION_UNAVAILABLE: "Location access denied. Attendance cannot be verified.",
    RejectionReason.OUT_OF_RANGE: "Outside lecture range. Attendance denied. You are {distance}m away.",
    RejectionReason.DUPLICATE_SUBMISSION: "You have already logged attendance for this session.",
}

EXPIRED_LINK_MESSAGE = "This session link has expired."


@dataclass(frozen=True)
class Rejection:
    reason: RejectionReason
    message: str

    @classmethod
    def of(cls, reason: RejectionReason, **details) -> "Rejection":
        return cls(reason=reason, message=REJECTION_MESSAGES[reason].format(**details))


@dataclass(frozen=True)
class SubmissionResult:
    """Tagged outcome of one submission: accepted with a record, or one rejection."""

    ok: bool
    record: Optional[AttendanceRecord] = None
    reason: Optional[RejectionReason] = None
    message: str = ""

    @classmethod
    def accepted(cls, record: AttendanceRecord) -> "SubmissionResult":
        return cls(ok=True, record=record, message=f"Attendance successfully logged for {record.student_name}!")

    @classmethod
    def rejected(cls, rejection: Rejection) -> "SubmissionResult":
        return cls(ok=False, reason=rejection.reason, message=rejection.message)

    def to_dict(self) -> dict:
        return {
            "success": self.ok,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "record": self.record.to_dict(include_face=False) if self.record else None,
        }
