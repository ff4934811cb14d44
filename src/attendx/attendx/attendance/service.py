from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_ms as _now_ms
from ..core.enums import EventTopic, RejectionReason
from ..core.exceptions import LocationCancelledError, LocationUnavailableError
from ..events.bus import EventBus
from ..geo.location import LocationProvider, acquire_position
from ..sessions.key_generator import generate_id
from ..sessions.repository import SessionRepository
from .checks.base import SubmissionCheck, SubmissionContext
from .factory import SubmissionCheckFactory
from .model import AttendanceRecord, DeviceLock, Submission
from .repository import DeviceLockRepository, RecordRepository
from .result import Rejection, SubmissionResult

logger = logging.getLogger(__name__)


class SubmissionValidator:
    """Use case: verify a student's presence proof and record it.

    Every outcome is a SubmissionResult; writes happen only after all checks pass.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        records: RecordRepository,
        device_locks: DeviceLockRepository,
        *,
        check_factory: Optional[SubmissionCheckFactory] = None,
        events: Optional[EventBus] = None,
        id_generator: Callable[[], str] = generate_id,
    ):
        self._sessions = sessions
        self._records = records
        self._locks = device_locks
        self._factory = check_factory or SubmissionCheckFactory(records=records, device_locks=device_locks)
        self._events = events
        self._id_generator = id_generator

    def submit(
        self,
        session_id: str,
        submission: Submission,
        *,
        locator: LocationProvider,
        device_id: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
        now_ms: Optional[int] = None,
    ) -> SubmissionResult:
        ctx = SubmissionContext(
            session=self._sessions.get_by_id(session_id),
            submission=submission,
            matric_no=(submission.matric_no or "").strip().upper(),
            device_id=device_id or None,
            now_ms=now_ms if now_ms is not None else _now_ms(),
        )

        rejection = self._run(self._factory.before_location(), ctx)
        if rejection:
            return self._reject(session_id, ctx, rejection)

        try:
            position = acquire_position(locator, cancel=cancel)
        except LocationCancelledError:
            logger.info("submission for %s cancelled during location fetch", session_id)
            return self._reject(
                session_id,
                ctx,
                Rejection(reason=RejectionReason.LOCATION_UNAVAILABLE, message="Location request was cancelled."),
            )
        except LocationUnavailableError:
            return self._reject(session_id, ctx, Rejection.of(RejectionReason.LOCATION_UNAVAILABLE))

        ctx = replace(ctx, position=position)
        rejection = self._run(self._factory.after_location(), ctx)
        if rejection:
            return self._reject(session_id, ctx, rejection)

        return self._record(session_id, ctx)

    @staticmethod
    def _run(checks: Sequence[SubmissionCheck], ctx: SubmissionContext) -> Optional[Rejection]:
        for check in checks:
            rejection = check.evaluate(ctx)
            if rejection:
                return rejection
        return None

    def _record(self, session_id: str, ctx: SubmissionContext) -> SubmissionResult:
        submission = ctx.submission
        record = AttendanceRecord(
            record_id=self._id_generator(),
            session_id=session_id,
            student_name=submission.name.strip(),
            matric_no=ctx.matric_no,
            department=submission.department,
            timestamp=ctx.now_ms,
            location=ctx.position,
            face_image=submission.face_image or None,
        )

        # The lock and duplicate checks above are advisory; the claim and insert below are the atomic ones.
        if ctx.device_id:
            lock = self._locks.bind_if_absent(
                DeviceLock(device_id=ctx.device_id, session_id=session_id, matric_no=ctx.matric_no, created_at=ctx.now_ms)
            )
            if lock.matric_no.upper() != ctx.matric_no:
                return self._reject(session_id, ctx, Rejection.of(RejectionReason.DEVICE_LOCKED, matric_no=lock.matric_no))

        # A lost insert leaves the lock in place; it is bound to this same matric.
        if not self._records.append_if_absent(record):
            return self._reject(session_id, ctx, Rejection.of(RejectionReason.DUPLICATE_SUBMISSION))

        logger.info("attendance accepted: session=%s matric=%s", session_id, ctx.matric_no)
        if self._events:
            self._events.publish(
                EventTopic.RECORD_CREATED,
                {"session_id": session_id, "record_id": record.record_id, "matric_no": record.matric_no},
            )
        return SubmissionResult.accepted(record)

    @staticmethod
    def _reject(session_id: str, ctx: SubmissionContext, rejection: Rejection) -> SubmissionResult:
        logger.info(
            "attendance rejected: session=%s matric=%s reason=%s",
            session_id,
            ctx.matric_no,
            rejection.reason.value,
        )
        return SubmissionResult.rejected(rejection)
