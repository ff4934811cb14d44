from __future__ import annotations

import itertools
import threading

import pytest

from src.attendx.attendx.attendance.memory_record_repository import InMemoryRecordRepository
from src.attendx.attendx.attendance.model import AttendanceRecord
from src.attendx.attendx.core.enums import EventTopic, SessionStatus
from src.attendx.attendx.core.exceptions import (
    LocationCancelledError,
    LocationUnavailableError,
    SessionNotFoundError,
    ValidationError,
)
from src.attendx.attendx.events.bus import EventBus
from src.attendx.attendx.geo.location import StaticLocationProvider
from src.attendx.attendx.geo.model import GeoPoint
from src.attendx.attendx.sessions.key_generator import generate_session_key
from src.attendx.attendx.sessions.memory_session_repository import InMemorySessionRepository
from src.attendx.attendx.sessions.model import CourseSelection
from src.attendx.attendx.sessions.service import SessionLifecycle, portal_link

NOW = 1_700_000_000_000
HERE = StaticLocationProvider(6.5244, 3.3792)
CPE301 = CourseSelection(department_id="cpe", level="300", course_id="cpe301")


def make_lifecycle(records=None):
    sessions = InMemorySessionRepository()
    records = records or InMemoryRecordRepository()
    events = EventBus()
    published = []
    events.subscribe(published.append)
    ids = itertools.count(1)
    keys = iter(["abc123", "XYZ789", "QWE456"])
    lifecycle = SessionLifecycle(
        sessions,
        records,
        events=events,
        id_generator=lambda: f"s{next(ids)}",
        key_generator=lambda: next(keys),
    )
    return lifecycle, sessions, records, published


def _record(record_id: str, session_id: str, matric: str, ts: int) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=record_id,
        session_id=session_id,
        student_name=f"Student {matric}",
        matric_no=matric,
        department="cpe",
        timestamp=ts,
        location=GeoPoint(6.5244, 3.3792),
    )


def test_start_creates_active_session():
    lifecycle, sessions, _, published = make_lifecycle()
    session = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)

    assert session.session_id == "s1"
    assert session.session_key == "ABC123"
    assert session.active is True
    assert session.status == SessionStatus.ACTIVE
    assert session.start_time == NOW
    assert session.end_time is None
    assert session.radius == 100.0
    assert session.location == GeoPoint(6.5244, 3.3792)
    assert sessions.get_by_id("s1") == session
    assert [e.topic for e in published] == [EventTopic.SESSION_STARTED]


def test_start_uses_custom_radius():
    lifecycle, *_ = make_lifecycle()
    assert lifecycle.start("lect-1", CPE301, HERE, radius=40, now_ms=NOW).radius == 40.0


@pytest.mark.parametrize("radius", [0, -5, float("nan"), float("inf")])
def test_start_rejects_unusable_radius(radius):
    lifecycle, sessions, _, _ = make_lifecycle()
    with pytest.raises(ValidationError):
        lifecycle.start("lect-1", CPE301, HERE, radius=radius, now_ms=NOW)
    assert sessions.list_all() == []


def test_second_start_deactivates_first():
    lifecycle, sessions, _, _ = make_lifecycle()
    first = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)
    second = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW + 1000)

    stored_first = sessions.get_by_id(first.session_id)
    assert stored_first.active is False
    # Superseded sessions are deactivated, not ended.
    assert stored_first.end_time is None
    assert sessions.get_by_id(second.session_id).active is True
    assert lifecycle.get_active() == second
    assert sum(1 for s in sessions.list_all() if s.active) == 1


@pytest.mark.parametrize(
    "selection",
    [
        CourseSelection(department_id="", level="300", course_id="cpe301"),
        CourseSelection(department_id="cpe", level=" ", course_id="cpe301"),
        CourseSelection(department_id="cpe", level="300", course_id=""),
    ],
)
def test_start_requires_full_selection(selection):
    lifecycle, sessions, _, _ = make_lifecycle()
    with pytest.raises(ValidationError):
        lifecycle.start("lect-1", selection, HERE, now_ms=NOW)
    assert sessions.list_all() == []


def test_start_without_location_stores_nothing():
    lifecycle, sessions, _, published = make_lifecycle()
    lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)

    with pytest.raises(LocationUnavailableError):
        lifecycle.start("lect-1", CPE301, StaticLocationProvider(None, None), now_ms=NOW + 1)

    # The running session is untouched when the new one cannot start.
    assert lifecycle.get_active().session_id == "s1"
    assert len(sessions.list_all()) == 1
    assert len(published) == 1


def test_start_can_be_cancelled():
    lifecycle, sessions, _, _ = make_lifecycle()
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(LocationCancelledError):
        lifecycle.start("lect-1", CPE301, HERE, cancel=cancel, now_ms=NOW)
    assert sessions.list_all() == []


def test_end_sets_end_time():
    lifecycle, sessions, _, published = make_lifecycle()
    session = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)

    ended = lifecycle.end(session.session_id, now_ms=NOW + 5000)

    assert ended.active is False
    assert ended.end_time == NOW + 5000
    assert ended.status == SessionStatus.ENDED
    assert sessions.get_by_id(session.session_id) == ended
    assert [e.topic for e in published] == [EventTopic.SESSION_STARTED, EventTopic.SESSION_ENDED]


def test_end_is_idempotent():
    lifecycle, sessions, _, published = make_lifecycle()
    session = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)
    first = lifecycle.end(session.session_id, now_ms=NOW + 5000)

    second = lifecycle.end(session.session_id, now_ms=NOW + 9000)

    assert second == first
    assert sessions.get_by_id(session.session_id).end_time == NOW + 5000
    assert len(published) == 2


def test_end_unknown_session():
    lifecycle, *_ = make_lifecycle()
    with pytest.raises(SessionNotFoundError):
        lifecycle.end("missing")


def test_countdown_and_expiry():
    lifecycle, *_ = make_lifecycle()
    session = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)

    assert lifecycle.countdown_label(session, now_ms=NOW) == "30:00"
    assert lifecycle.countdown_label(session, now_ms=NOW + 61_500) == "28:58"
    assert lifecycle.is_key_expired(session, now_ms=NOW + 29 * 60_000) is False
    assert lifecycle.is_key_expired(session, now_ms=NOW + 30 * 60_000) is True
    assert lifecycle.countdown_label(session, now_ms=NOW + 31 * 60_000) == "EXPIRED"


def test_expiry_does_not_deactivate():
    lifecycle, *_ = make_lifecycle()
    session = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)
    assert lifecycle.is_key_expired(session, now_ms=NOW + 60 * 60_000)
    assert lifecycle.get(session.session_id).active is True


def test_portal_link_format():
    assert portal_link("https://uni.example", "/attendx/", "s42") == "https://uni.example/attendx/#/portal/s42"


def test_history_is_newest_first_with_counts():
    records = InMemoryRecordRepository()
    lifecycle, *_ = make_lifecycle(records)
    first = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)
    second = lifecycle.start("lect-1", CourseSelection("ele", "200", "ele201"), HERE, now_ms=NOW + 1000)
    records.append_if_absent(_record("r1", first.session_id, "ENG/1", NOW + 10))
    records.append_if_absent(_record("r2", first.session_id, "ENG/2", NOW + 20))

    history = lifecycle.history()

    assert [h.session.session_id for h in history] == [second.session_id, first.session_id]
    assert [h.attendance_count for h in history] == [0, 2]
    assert history[0].course_label == "ELE 201 - Circuit Theory I"


def test_roster_and_records_since():
    records = InMemoryRecordRepository()
    lifecycle, *_ = make_lifecycle(records)
    session = lifecycle.start("lect-1", CPE301, HERE, now_ms=NOW)
    records.append_if_absent(_record("r1", session.session_id, "ENG/1", NOW + 10))
    records.append_if_absent(_record("r2", session.session_id, "ENG/2", NOW + 20))
    records.append_if_absent(_record("r3", "other", "ENG/3", NOW + 30))

    assert [r.record_id for r in lifecycle.roster(session.session_id)] == ["r2", "r1"]
    assert [r.record_id for r in lifecycle.records_since(session.session_id, NOW + 10)] == ["r2"]
    with pytest.raises(SessionNotFoundError):
        lifecycle.roster("missing")


def test_generated_keys_are_six_upper_alphanumerics():
    for _ in range(50):
        key = generate_session_key()
        assert len(key) == 6
        assert key.isalnum()
        assert key == key.upper()
