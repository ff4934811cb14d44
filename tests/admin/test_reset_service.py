from src.attendx.attendx.admin.service import ResetService
from src.attendx.attendx.attendance.memory_record_repository import (
    InMemoryDeviceLockRepository,
    InMemoryRecordRepository,
)
from src.attendx.attendx.attendance.model import AttendanceRecord, DeviceLock
from src.attendx.attendx.core.enums import EventTopic
from src.attendx.attendx.events.bus import EventBus
from src.attendx.attendx.geo.model import GeoPoint
from src.attendx.attendx.sessions.memory_session_repository import InMemorySessionRepository
from src.attendx.attendx.sessions.model import Session


def test_reset_clears_every_store_and_notifies():
    sessions = InMemorySessionRepository(
        [
            Session(
                session_id="s1",
                lecturer_id="lect-1",
                course_id="cpe301",
                department_id="cpe",
                level="300",
                session_key="ABC123",
                start_time=0,
                location=GeoPoint(0.0, 0.0),
                radius=100.0,
                active=True,
            )
        ]
    )
    records = InMemoryRecordRepository(
        [
            AttendanceRecord(
                record_id="r1",
                session_id="s1",
                student_name="Ada",
                matric_no="ENG/1",
                department="cpe",
                timestamp=1,
                location=GeoPoint(0.0, 0.0),
            )
        ]
    )
    locks = InMemoryDeviceLockRepository()
    locks.bind_if_absent(DeviceLock(device_id="d1", session_id="s1", matric_no="ENG/1", created_at=1))
    events = EventBus()
    seen = []
    events.subscribe(seen.append)

    ResetService(sessions, records, locks, events=events).reset_all()

    assert sessions.list_all() == []
    assert records.list_all() == []
    assert locks.get(device_id="d1", session_id="s1") is None
    assert [e.topic for e in seen] == [EventTopic.STORE_RESET]
