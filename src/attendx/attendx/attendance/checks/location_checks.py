from __future__ import annotations

from typing import Optional

from ...core.enums import RejectionReason
from ..repository import RecordRepository
from ..result import Rejection
from .base import SubmissionCheck, SubmissionContext


class GeofenceCheck(SubmissionCheck):
    """Distance to the session location must not exceed radius + slack."""

    def __init__(self, *, slack_meters: float):
        self._slack_meters = float(slack_meters)

    def evaluate(self, ctx: SubmissionContext) -> Optional[Rejection]:
        if ctx.session is None or ctx.position is None:
            return Rejection.of(RejectionReason.LOCATION_UNAVAILABLE)

        distance = ctx.position.distance_to(ctx.session.location)
        allowed = ctx.session.radius + self._slack_meters
        # A NaN distance fails the comparison below, so negate the pass condition.
        if not distance <= allowed:
            return Rejection.of(RejectionReason.OUT_OF_RANGE, distance=round(distance))
        return None


class DuplicateSubmissionCheck(SubmissionCheck):
    def __init__(self, records: RecordRepository):
        self._records = records

    def evaluate(self, ctx: SubmissionContext) -> Optional[Rejection]:
        if ctx.session is None:
            return None
        if self._records.find(session_id=ctx.session.session_id, matric_no=ctx.matric_no):
            return Rejection.of(RejectionReason.DUPLICATE_SUBMISSION)
        return None
