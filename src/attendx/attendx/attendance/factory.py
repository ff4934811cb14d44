from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..common.datetime_utils import minutes_to_ms
from ..core.constants import GEOFENCE_SLACK_METERS, LINK_EXPIRY_MINUTES
from .checks.base import SubmissionCheck
from .checks.location_checks import DuplicateSubmissionCheck, GeofenceCheck
from .checks.session_checks import ActiveSessionCheck, DeviceLockCheck, FaceCaptureCheck, SessionKeyCheck
from .repository import DeviceLockRepository, RecordRepository


@dataclass
class SubmissionCheckFactory:
    """Factory Pattern: assemble the ordered verification rules.

    The order defines which rejection a student sees first.
    """

    records: RecordRepository
    device_locks: DeviceLockRepository
    slack_meters: float = GEOFENCE_SLACK_METERS
    link_expiry_minutes: float = LINK_EXPIRY_MINUTES
    enforce_key_expiry: bool = True

    def before_location(self) -> Sequence[SubmissionCheck]:
        return [
            ActiveSessionCheck(
                link_expiry_ms=minutes_to_ms(self.link_expiry_minutes),
                enforce_expiry=self.enforce_key_expiry,
            ),
            DeviceLockCheck(self.device_locks),
            SessionKeyCheck(),
            FaceCaptureCheck(),
        ]

    def after_location(self) -> Sequence[SubmissionCheck]:
        return [
            GeofenceCheck(slack_meters=self.slack_meters),
            DuplicateSubmissionCheck(self.records),
        ]
