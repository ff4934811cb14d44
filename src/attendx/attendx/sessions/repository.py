from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Session


class SessionRepository(Protocol):
    def list_all(self) -> Sequence[Session]:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def add(self, session: Session) -> None:
        raise NotImplementedError

    def update(self, session: Session) -> bool:
        """Replace the stored session with the same id.

        Returns False when no such session exists.
        """

        raise NotImplementedError

    def deactivate_all(self) -> int:
        """Set active=False on every session; end_time is left untouched."""

        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError
