from __future__ import annotations

import csv
import io
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import RecordRepository
from ..core.catalog import find_course
from ..core.constants import ELIGIBILITY_THRESHOLD_PERCENT
from ..core.exceptions import SessionNotFoundError
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from .model import AuditReport, StudentStats


def attendance_percentage(attended: int, total_sessions: int) -> float:
    if total_sessions <= 0:
        return 0.0
    return (attended / total_sessions) * 100


def aggregate(
    course_sessions: Sequence[Session],
    records: Iterable[AttendanceRecord],
    *,
    roster: Optional[Sequence[AttendanceRecord]] = None,
    threshold: float = ELIGIBILITY_THRESHOLD_PERCENT,
) -> list[StudentStats]:
    """Per-student attendance over the given course sessions.

    Without a roster every matric seen in the course records is reported, named
    after its first record. With a roster (one session's attendees) only those
    students are reported, under the name they used in that session. Output is
    sorted by percentage descending; ties keep encounter order.
    """

    session_ids = {s.session_id for s in course_sessions}
    total = len(course_sessions)

    counts: dict[str, int] = {}
    names: dict[str, str] = {}
    for r in records:
        if r.session_id not in session_ids:
            continue
        matric = r.matric_no.upper()
        counts[matric] = counts.get(matric, 0) + 1
        names.setdefault(matric, r.student_name)

    if roster is not None:
        entries: list[tuple[str, str]] = []
        seen: set[str] = set()
        for r in roster:
            matric = r.matric_no.upper()
            if matric in seen:
                continue
            seen.add(matric)
            entries.append((matric, r.student_name))
    else:
        entries = list(names.items())

    stats = []
    for matric, name in entries:
        attended = counts.get(matric, 0)
        pct = attendance_percentage(attended, total)
        stats.append(
            StudentStats(
                matric_no=matric,
                name=name,
                sessions_attended=attended,
                total_sessions=total,
                percentage=pct,
                eligible=pct >= threshold,
            )
        )

    # sorted() is stable, so equal percentages stay in encounter order.
    return sorted(stats, key=lambda s: s.percentage, reverse=True)


class EligibilityAggregator:
    """Use case: exam eligibility audit over a course's sessions."""

    def __init__(
        self,
        sessions: SessionRepository,
        records: RecordRepository,
        *,
        threshold: float = ELIGIBILITY_THRESHOLD_PERCENT,
    ):
        self._sessions = sessions
        self._records = records
        self._threshold = float(threshold)

    def _course_sessions(self, course_id: str) -> list[Session]:
        return [s for s in self._sessions.list_all() if s.course_id == course_id]

    def for_course(self, course_id: str) -> list[StudentStats]:
        return aggregate(self._course_sessions(course_id), self._records.list_all(), threshold=self._threshold)

    def for_session(self, session_id: str) -> list[StudentStats]:
        """Stats for the students present in one session, over that session's course."""
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise SessionNotFoundError(f"Session {session_id} not found")

        roster = sorted(self._records.list_for_session(session_id), key=lambda r: r.timestamp, reverse=True)
        return aggregate(
            self._course_sessions(session.course_id),
            self._records.list_all(),
            roster=roster,
            threshold=self._threshold,
        )

    def build_audit(self, course_id: str) -> AuditReport:
        course = find_course(course_id)
        return AuditReport(
            course_id=course_id,
            course_label=course.label if course else course_id,
            total_sessions=len(self._course_sessions(course_id)),
            stats=self.for_course(course_id),
        )


def audit_to_csv(report: AuditReport) -> bytes:
    """Printable eligibility list; utf-8-sig so spreadsheet tools detect the encoding."""

    out = io.StringIO()
    writer = csv.DictWriter(
        out,
        fieldnames=["matric_no", "name", "sessions_attended", "total_sessions", "percentage", "eligible"],
    )
    writer.writeheader()
    for s in report.stats:
        writer.writerow(
            {
                "matric_no": s.matric_no,
                "name": s.name,
                "sessions_attended": s.sessions_attended,
                "total_sessions": s.total_sessions,
                "percentage": f"{s.percentage:.1f}",
                "eligible": "ELIGIBLE" if s.eligible else "INELIGIBLE",
            }
        )
    return out.getvalue().encode("utf-8-sig")
