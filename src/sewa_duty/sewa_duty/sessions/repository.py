from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SessionGroup
from .model import DutySession


class SessionRepository(Protocol):
    def load_session(self, session_id: str) -> Optional[DutySession]:
        raise NotImplementedError

    def save_session(self, session: DutySession) -> None:
        """Insert or update (the only update is completed false -> true)."""

        raise NotImplementedError

    def list_open_sessions(self, *, group: Optional[SessionGroup] = None) -> Sequence[DutySession]:
        """Uncompleted sessions, oldest first.

        Nothing prevents several open sessions per group; callers that want
        exclusivity can check this list before creating a new one.
        """

        raise NotImplementedError
