from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Sequence

from .model import Session
from .repository import SessionRepository


class InMemorySessionRepository(SessionRepository):
    """Process-local store; every method runs under one lock."""

    def __init__(self, sessions: Sequence[Session] = ()):
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {s.session_id: s for s in sessions}

    def list_all(self) -> Sequence[Session]:
        with self._lock:
            return list(self._sessions.values())

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def add(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.session_id] = session

    def update(self, session: Session) -> bool:
        with self._lock:
            if session.session_id not in self._sessions:
                return False
            self._sessions[session.session_id] = session
            return True

    def deactivate_all(self) -> int:
        with self._lock:
            changed = 0
            for sid, s in self._sessions.items():
                if s.active:
                    self._sessions[sid] = replace(s, active=False)
                    changed += 1
            return changed

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
