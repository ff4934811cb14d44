from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_entry
from ..geo.model import GeoPoint
from .model import AttendanceRecord, DeviceLock
from .repository import DeviceLockRepository, RecordRepository

_RECORD_COLUMNS = """
    record_id, session_id, student_name, matric_no, department, timestamp_ms,
    location_lat, location_lng, face_image
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=r["record_id"],
        session_id=r["session_id"],
        student_name=r["student_name"],
        matric_no=r["matric_no"],
        department=r["department"],
        timestamp=int(r["timestamp_ms"]),
        location=GeoPoint(lat=float(r["location_lat"]), lng=float(r["location_lng"])),
        face_image=r.get("face_image"),
    )


def _to_lock(r: dict) -> DeviceLock:
    return DeviceLock(
        device_id=r["device_id"],
        session_id=r["session_id"],
        matric_no=r["matric_no"],
        created_at=int(r["created_at"]),
    )


class MySQLRecordRepository(RecordRepository):
    """Duplicate protection relies on UNIQUE(session_id, matric_no)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance_records ORDER BY id ASC")
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE session_id=%s ORDER BY id ASC",
                (session_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find(self, *, session_id: str, matric_no: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE session_id=%s AND matric_no=%s",
                (session_id, matric_no.upper()),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def append_if_absent(self, record: AttendanceRecord) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        record_id, session_id, student_name, matric_no, department, timestamp_ms,
                        location_lat, location_lng, face_image
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.record_id,
                        record.session_id,
                        record.student_name,
                        record.matric_no.upper(),
                        record.department,
                        record.timestamp,
                        record.location.lat,
                        record.location.lng,
                        record.face_image,
                    ),
                )
        except IntegrityError as e:
            if is_duplicate_entry(e):
                return False
            raise
        return True

    def clear(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records")


class MySQLDeviceLockRepository(DeviceLockRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, device_id: str, session_id: str) -> Optional[DeviceLock]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT device_id, session_id, matric_no, created_at
                FROM device_locks
                WHERE device_id=%s AND session_id=%s
                """,
                (device_id, session_id),
            )
            r = fetchone(cur)
            return _to_lock(r) if r else None

    def bind_if_absent(self, lock: DeviceLock) -> DeviceLock:
        with db_cursor(self._conn_factory) as (_, cur):
            # INSERT IGNORE keeps the first binding when the device is already locked.
            cur.execute(
                """
                INSERT IGNORE INTO device_locks(device_id, session_id, matric_no, created_at)
                VALUES(%s,%s,%s,%s)
                """,
                (lock.device_id, lock.session_id, lock.matric_no.upper(), lock.created_at),
            )
            cur.execute(
                """
                SELECT device_id, session_id, matric_no, created_at
                FROM device_locks
                WHERE device_id=%s AND session_id=%s
                """,
                (lock.device_id, lock.session_id),
            )
            return _to_lock(fetchone(cur))

    def list_for_session(self, session_id: str) -> Sequence[DeviceLock]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT device_id, session_id, matric_no, created_at FROM device_locks WHERE session_id=%s",
                (session_id,),
            )
            return [_to_lock(r) for r in fetchall(cur)]

    def clear(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM device_locks")
