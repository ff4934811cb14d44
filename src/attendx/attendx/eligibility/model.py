from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class StudentStats:
    """Derived per-student attendance for one course. Never stored."""

    matric_no: str
    name: str
    sessions_attended: int
    total_sessions: int
    percentage: float
    eligible: bool

    def to_dict(self) -> dict:
        return {
            "matricNo": self.matric_no,
            "name": self.name,
            "sessionsAttended": self.sessions_attended,
            "totalSessions": self.total_sessions,
            "percentage": self.percentage,
            "eligible": self.eligible,
        }


@dataclass(frozen=True)
class AuditReport:
    """Read-model for the exam eligibility audit page."""

    course_id: str
    course_label: str
    total_sessions: int
    stats: Sequence[StudentStats]

    @property
    def eligible_count(self) -> int:
        return sum(1 for s in self.stats if s.eligible)

    @property
    def ineligible_count(self) -> int:
        return len(self.stats) - self.eligible_count
