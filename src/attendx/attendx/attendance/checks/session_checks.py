from __future__ import annotations

from typing import Optional

from ...core.enums import RejectionReason
from ..repository import DeviceLockRepository
from ..result import EXPIRED_LINK_MESSAGE, Rejection
from .base import SubmissionCheck, SubmissionContext


class ActiveSessionCheck(SubmissionCheck):
    """Session must exist and be active; optionally its link must not have expired."""

    def __init__(self, *, link_expiry_ms: int, enforce_expiry: bool):
        self._link_expiry_ms = int(link_expiry_ms)
        self._enforce_expiry = enforce_expiry

    def evaluate(self, ctx: SubmissionContext) -> Optional[Rejection]:
        session = ctx.session
        if session is None or not session.active:
            return Rejection.of(RejectionReason.SESSION_INACTIVE)
        if self._enforce_expiry and ctx.now_ms - session.start_time >= self._link_expiry_ms:
            return Rejection(reason=RejectionReason.SESSION_INACTIVE, message=EXPIRED_LINK_MESSAGE)
        return None


class DeviceLockCheck(SubmissionCheck):
    """A device already bound to another matric cannot submit for it."""

    def __init__(self, locks: DeviceLockRepository):
        self._locks = locks

    def evaluate(self, ctx: SubmissionContext) -> Optional[Rejection]:
        if not ctx.device_id or ctx.session is None:
            return None
        lock = self._locks.get(device_id=ctx.device_id, session_id=ctx.session.session_id)
        if lock and lock.matric_no.upper() != ctx.matric_no:
            return Rejection.of(RejectionReason.DEVICE_LOCKED, matric_no=lock.matric_no)
        return None


class SessionKeyCheck(SubmissionCheck):
    def evaluate(self, ctx: SubmissionContext) -> Optional[Rejection]:
        key = (ctx.submission.session_key or "").strip().upper()
        if ctx.session is None or key != ctx.session.session_key.upper():
            return Rejection.of(RejectionReason.INVALID_KEY)
        return None


class FaceCaptureCheck(SubmissionCheck):
    """Only enforced when the client reported a working camera."""

    def evaluate(self, ctx: SubmissionContext) -> Optional[Rejection]:
        if ctx.submission.camera_active and not ctx.submission.face_image:
            return Rejection.of(RejectionReason.FACE_CAPTURE_FAILED)
        return None
