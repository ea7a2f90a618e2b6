"""Duty session state machine: Scheduled -> Active -> Completed.

Completion is one-way and only allowed once every attendance record of the
session has an out-time. Reads (reports) are never gated; mutations are
refused once a session is completed.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..core.enums import SessionState
from ..core.exceptions import OpenRecordsRemainError
from .model import DutySession


class SessionLifecycle:
    def state(self, session: DutySession, now: datetime) -> SessionState:
        if session.completed:
            return SessionState.COMPLETED
        if now < session.start_at:
            return SessionState.SCHEDULED
        return SessionState.ACTIVE

    def open_count(self, session: DutySession, records: Iterable[AttendanceRecord]) -> int:
        return sum(1 for r in records if r.session_id == session.session_id and r.is_open)

    def can_complete(self, session: DutySession, records: Iterable[AttendanceRecord]) -> bool:
        return self.open_count(session, records) == 0

    def can_mutate(self, session: DutySession) -> bool:
        return not session.completed

    def complete(self, session: DutySession, records: Iterable[AttendanceRecord]) -> DutySession:
        """Return the completed session. Completing twice is a no-op."""
        if session.completed:
            return session
        remaining = self.open_count(session, records)
        if remaining:
            raise OpenRecordsRemainError(remaining)
        return replace(session, completed=True)
