from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geo.model import GeoPoint
from .model import Session
from .repository import SessionRepository

_COLUMNS = """
    session_id, lecturer_id, course_id, department_id, level, session_key,
    start_time, end_time, location_lat, location_lng, radius, active
"""


def _to_session(r: dict) -> Session:
    return Session(
        session_id=r["session_id"],
        lecturer_id=r["lecturer_id"],
        course_id=r["course_id"],
        department_id=r["department_id"],
        level=r["level"],
        session_key=r["session_key"],
        start_time=int(r["start_time"]),
        end_time=int(r["end_time"]) if r.get("end_time") is not None else None,
        location=GeoPoint(lat=float(r["location_lat"]), lng=float(r["location_lng"])),
        radius=float(r["radius"]),
        active=bool(r["active"]),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions ORDER BY start_time ASC")
            return [_to_session(r) for r in fetchall(cur)]

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def add(self, session: Session) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    session_id, lecturer_id, course_id, department_id, level, session_key,
                    start_time, end_time, location_lat, location_lng, radius, active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.session_id,
                    session.lecturer_id,
                    session.course_id,
                    session.department_id,
                    session.level,
                    session.session_key,
                    session.start_time,
                    session.end_time,
                    session.location.lat,
                    session.location.lng,
                    session.radius,
                    int(session.active),
                ),
            )

    def update(self, session: Session) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET active=%s, end_time=%s
                WHERE session_id=%s
                """,
                (int(session.active), session.end_time, session.session_id),
            )
            return cur.rowcount > 0

    def deactivate_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance_sessions SET active=0 WHERE active=1")
            return int(cur.rowcount)

    def clear(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_sessions")
