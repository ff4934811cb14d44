from __future__ import annotations

import threading
from typing import Optional, Sequence

from .model import AttendanceRecord, DeviceLock
from .repository import DeviceLockRepository, RecordRepository


class InMemoryRecordRepository(RecordRepository):
    """Append-only list plus a (session, matric) index, all under one lock."""

    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self._lock = threading.Lock()
        self._records: list[AttendanceRecord] = []
        self._index: dict[tuple[str, str], AttendanceRecord] = {}
        for r in records:
            self.append_if_absent(r)

    def list_all(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            return list(self._records)

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [r for r in self._records if r.session_id == session_id]

    def find(self, *, session_id: str, matric_no: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._index.get((session_id, matric_no.upper()))

    def append_if_absent(self, record: AttendanceRecord) -> bool:
        key = (record.session_id, record.matric_no.upper())
        with self._lock:
            if key in self._index:
                return False
            self._index[key] = record
            self._records.append(record)
            return True

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._index.clear()


class InMemoryDeviceLockRepository(DeviceLockRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._locks: dict[tuple[str, str], DeviceLock] = {}

    def get(self, *, device_id: str, session_id: str) -> Optional[DeviceLock]:
        with self._lock:
            return self._locks.get((device_id, session_id))

    def bind_if_absent(self, lock: DeviceLock) -> DeviceLock:
        with self._lock:
            return self._locks.setdefault((lock.device_id, lock.session_id), lock)

    def list_for_session(self, session_id: str) -> Sequence[DeviceLock]:
        with self._lock:
            return [lk for (_, sid), lk in self._locks.items() if sid == session_id]

    def clear(self) -> None:
        with self._lock:
            self._locks.clear()
