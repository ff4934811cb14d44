from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...geo.model import GeoPoint
from ...sessions.model import Session
from ..model import Submission
from ..result import Rejection


@dataclass(frozen=True)
class SubmissionContext:
    session: Optional[Session]
    submission: Submission
    matric_no: str
    device_id: Optional[str]
    now_ms: int
    position: Optional[GeoPoint] = None


class SubmissionCheck(ABC):
    """Strategy Pattern: one verification rule applied to a submission.

    Checks are read-only; they return a Rejection or None to let the next run.
    """

    @abstractmethod
    def evaluate(self, ctx: SubmissionContext) -> Optional[Rejection]:
        raise NotImplementedError
