from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, DeviceLock


class RecordRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find(self, *, session_id: str, matric_no: str) -> Optional[AttendanceRecord]:
        """Lookup by (session_id, matric_no); matric compared case-insensitively."""

        raise NotImplementedError

    def append_if_absent(self, record: AttendanceRecord) -> bool:
        """Atomically store the record unless one exists for the same session and matric.

        Returns False (and stores nothing) when a record already exists.
        """

        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class DeviceLockRepository(Protocol):
    def get(self, *, device_id: str, session_id: str) -> Optional[DeviceLock]:
        raise NotImplementedError

    def bind_if_absent(self, lock: DeviceLock) -> DeviceLock:
        """Store the lock unless the device is already bound for that session.

        Returns the lock in effect after the call.
        """

        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[DeviceLock]:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError
