from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .admin.service import ResetService
from .attendance.factory import SubmissionCheckFactory
from .attendance.memory_record_repository import InMemoryDeviceLockRepository, InMemoryRecordRepository
from .attendance.repository import DeviceLockRepository, RecordRepository
from .attendance.service import SubmissionValidator
from .core.constants import DEFAULT_RADIUS_METERS
from .eligibility.service import EligibilityAggregator
from .events.bus import EventBus
from .insights.service import AttendanceSummarizer, GeminiSummarizer
from .sessions.memory_session_repository import InMemorySessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionLifecycle


@dataclass(frozen=True)
class Container:
    events: EventBus

    sessions_repo: SessionRepository
    records_repo: RecordRepository
    device_locks_repo: DeviceLockRepository

    session_lifecycle: SessionLifecycle
    submission_validator: SubmissionValidator
    eligibility: EligibilityAggregator
    summarizer: AttendanceSummarizer
    reset_service: ResetService


def build_repositories(*, backend: str, db_config: Optional[dict] = None):
    if backend == "memory":
        return InMemorySessionRepository(), InMemoryRecordRepository(), InMemoryDeviceLockRepository()

    if backend == "mysql":
        # Imported lazily so the memory backend runs without a MySQL driver configured.
        from .attendance.mysql_record_repository import MySQLDeviceLockRepository, MySQLRecordRepository
        from .database.connection import DatabaseConnection, DBConfig
        from .sessions.mysql_session_repository import MySQLSessionRepository

        conn = DatabaseConnection(DBConfig.from_dict(db_config or {}))
        return MySQLSessionRepository(conn), MySQLRecordRepository(conn), MySQLDeviceLockRepository(conn)

    raise ValueError(f"Unknown storage backend: {backend!r}")


def build_container(
    *,
    backend: str = "memory",
    db_config: Optional[dict] = None,
    default_radius: float = DEFAULT_RADIUS_METERS,
    enforce_key_expiry: bool = True,
    summarizer: Optional[AttendanceSummarizer] = None,
    gemini_api_key: Optional[str] = None,
    gemini_model: str = "gemini-2.5-flash",
) -> Container:
    sessions_repo, records_repo, device_locks_repo = build_repositories(backend=backend, db_config=db_config)
    events = EventBus()

    session_lifecycle = SessionLifecycle(sessions_repo, records_repo, events=events, default_radius=default_radius)
    submission_validator = SubmissionValidator(
        sessions_repo,
        records_repo,
        device_locks_repo,
        check_factory=SubmissionCheckFactory(
            records=records_repo,
            device_locks=device_locks_repo,
            enforce_key_expiry=enforce_key_expiry,
        ),
        events=events,
    )
    eligibility = EligibilityAggregator(sessions_repo, records_repo)
    reset_service = ResetService(sessions_repo, records_repo, device_locks_repo, events=events)

    return Container(
        events=events,
        sessions_repo=sessions_repo,
        records_repo=records_repo,
        device_locks_repo=device_locks_repo,
        session_lifecycle=session_lifecycle,
        submission_validator=submission_validator,
        eligibility=eligibility,
        summarizer=summarizer or GeminiSummarizer(gemini_api_key, model=gemini_model),
        reset_service=reset_service,
    )
