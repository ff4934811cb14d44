from src.attendx.attendx.attendance.checks.location_checks import DuplicateSubmissionCheck, GeofenceCheck
from src.attendx.attendx.attendance.checks.session_checks import (
    ActiveSessionCheck,
    DeviceLockCheck,
    FaceCaptureCheck,
    SessionKeyCheck,
)
from src.attendx.attendx.attendance.factory import SubmissionCheckFactory
from src.attendx.attendx.attendance.memory_record_repository import (
    InMemoryDeviceLockRepository,
    InMemoryRecordRepository,
)


def test_checks_run_in_verification_order():
    factory = SubmissionCheckFactory(records=InMemoryRecordRepository(), device_locks=InMemoryDeviceLockRepository())

    before = [type(c) for c in factory.before_location()]
    after = [type(c) for c in factory.after_location()]

    assert before == [ActiveSessionCheck, DeviceLockCheck, SessionKeyCheck, FaceCaptureCheck]
    assert after == [GeofenceCheck, DuplicateSubmissionCheck]
